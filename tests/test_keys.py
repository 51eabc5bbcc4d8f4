import pytest

from core.keys import decode_location, encode_location


@pytest.mark.parametrize(
    "user_id,claim_id",
    [
        ("abc-123", "01J9ZQ4T3V8M2K7X5N6P0R1S2T"),
        ("us-east-1:5f2c-11ee", "01HZZZZZZZZZZZZZZZZZZZZZZZ"),
        ("user with spaces", "c"),
        ("ü", "claim.v2"),
    ],
)
def test_round_trip(user_id, claim_id):
    location = encode_location(user_id, claim_id)
    assert decode_location(location) == (user_id, claim_id, True)


def test_encode_shape():
    assert encode_location("u1", "C1") == "user/u1/C1.txt"


@pytest.mark.parametrize(
    "user_id,claim_id",
    [("a/b", "c"), ("a", "c/d"), ("", "c"), ("a", "")],
)
def test_encode_rejects_unencodable_ids(user_id, claim_id):
    with pytest.raises(ValueError):
        encode_location(user_id, claim_id)


@pytest.mark.parametrize(
    "location",
    [
        "",
        "user/u1/C1.pdf",
        "user/u1/C1",
        "user/u1/C1.TXT",
        "users/u1/C1.txt",
        "user/u1/extra/C1.txt",
        "user/C1.txt",
        "/user/u1/C1.txt",
        "user//C1.txt",
        "user/u1/.txt",
        "other-bucket-prefix/user/u1/C1.txt",
    ],
)
def test_decode_rejects_foreign_locations(location):
    assert decode_location(location) == ("", "", False)
