# main.py
import logging
from fastapi_limiter import FastAPILimiter
import routes
from contextlib import asynccontextmanager
from util.enums import Environment, Color, ErrorMessage
from util.errors import AppError
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware
from config.settings import settings
from config.cache import close_redis, get_redis
from fastapi.responses import JSONResponse
from util.logger import init_logger

logger = logging.getLogger(__name__)


async def _real_ip(request: Request) -> str:
    if settings.TRUST_PROXY:
        fwd = request.headers.get("x-forwarded-for")
        if fwd:
            return fwd.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


@asynccontextmanager
async def lifespan(fastApi: FastAPI):
    try:
        init_logger()
        print(f"{Color.GREEN}Initializing...{Color.RESET}")
        redis = await get_redis()
        if settings.RATE_LIMIT_TIMES > 0:
            await FastAPILimiter.init(redis, identifier=_real_ip)
        print(f"{Color.BLUE}Server Started{Color.RESET}")
    except Exception as e:
        print("Failed to connect to Redis:", e)
        raise

    try:
        yield
    finally:
        try:
            await close_redis()
        except Exception as e:
            print("Error closing Redis:", e)

        print(f"{Color.RED}Server Shutdown{Color.RESET}")


app: FastAPI = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.ALLOWED_ORIGIN],
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Authorization", "Content-Type", "Accept", settings.DEV_BYPASS_HEADER],
)


@app.get("/healthz")
async def healthz():
    return {"ok": True}


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=ErrorMessage.INVALID_REQUEST.value.http_status,
        content={"message": "invalid json"},
    )


@app.exception_handler(429)
async def ratelimit_handler(request: Request, exc):
    return JSONResponse(
        status_code=429,
        content={"message": "Too many requests. Try again later."},
        headers={"Retry-After": str(settings.RATE_LIMIT_SECONDS)},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("request.unhandled path=%s", request.url.path)
    return JSONResponse(
        status_code=ErrorMessage.INTERNAL_ERROR.value.http_status,
        content={"message": ErrorMessage.INTERNAL_ERROR.value.message},
    )


routes.register_routes(app)

if __name__ == "__main__":
    import uvicorn

    reload = settings.APP_ENV == Environment.DEV
    uvicorn.run("main:app", host="127.0.0.1", port=8000, reload=reload)
