"""FastAPI application entrypoint. No business logic; only wiring, middleware and error mapping."""

import logging

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bookcircle.api.routes import router as api_router
from bookcircle.core.config import settings
from bookcircle.core.errors import AuthServiceError, ExpiredTokenError

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="BookCircle API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _www_authenticate(exc: AuthServiceError) -> str:
    if isinstance(exc, ExpiredTokenError):
        return 'Bearer error="invalid_token", error_description="The access token expired"'
    if exc.code == "invalid_token":
        return 'Bearer error="invalid_token"'
    return "Bearer"


@app.exception_handler(AuthServiceError)
async def handle_service_error(request: Request, exc: AuthServiceError) -> JSONResponse:
    """Map the error taxonomy to {detail, code}; internal causes are logged, never returned."""
    if exc.status_code >= 500:
        logger.error(
            "Request failed",
            extra={"path": request.url.path, "code": exc.code},
        )
    headers = None
    if exc.status_code == 401:
        headers = {"WWW-Authenticate": _www_authenticate(exc)}
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
        headers=headers,
    )


app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "BookCircle API"}
