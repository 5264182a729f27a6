import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.trustedhost import TrustedHostMiddleware

from duelytics.core.config import settings
from duelytics.core.errors import DuelyticsError, http_error_kind
from duelytics.core.logging import configure_logging
from duelytics.api.router import router

configure_logging()
logger = logging.getLogger("duelytics")

app = FastAPI(
    title="Duelytics",
    version="0.2.0",
)

allowed_hosts = [h.strip() for h in settings.ALLOWED_HOSTS.split(",") if h.strip()]
if not allowed_hosts:
    allowed_hosts = ["*"]
app.add_middleware(TrustedHostMiddleware, allowed_hosts=allowed_hosts)


@app.middleware("http")
async def security_headers_middleware(request: Request, call_next):
    response: Response = await call_next(request)
    if settings.SECURITY_HEADERS_ENABLED:
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if settings.ENV != "dev":
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
    return response


def _error(kind: str, detail: str, status: int, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status, content={"success": False, "error": kind, "detail": detail}, headers=headers)


@app.exception_handler(DuelyticsError)
async def duelytics_error_handler(request: Request, exc: DuelyticsError):
    return _error(exc.kind, exc.detail, exc.status_code)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _error(http_error_kind(exc.status_code), str(exc.detail), exc.status_code, getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    fields = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        fields.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return _error("validation_error", "; ".join(fields) or "Invalid request", 400)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return _error("server_error", "A server error occurred.", 500)


app.include_router(router)

@app.get("/health")
def health():
    return {"ok": True}
