class InternalURIs:
    API = "/api"
    V1 = API + "/v1"
    CLAIMS = V1 + "/claims"
    INTERNAL = V1 + "/internal"
    UPLOAD_EVENTS = INTERNAL + "/upload-events"


class ObjectStore:
    # Key namespace: user/<user_id>/<claim_id>.txt
    ROOT_SEGMENT = "user"
    SUFFIX = ".txt"
    CONTENT_TYPE_TEXT = "text/plain"
    SSE_ALGORITHM = "aws:kms"
    META_PREFIX = "x-amz-meta-"
    META_CLAIM_ID = "claim_id"
    META_USER_ID = "user_id"
    META_TAGS = "tags"
    META_CLIENT = "client"


class Headers:
    AUTHORIZATION = "authorization"
    EVENTS_TOKEN = "x-events-token"
