import logging
from contextlib import asynccontextmanager

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from app.api.v1.router import api_router
from app.config import settings
from app.core.exceptions import AppError, RateLimitError, ServiceUnavailableError
from app.core.middleware import RequestContextMiddleware
from app.core.rate_limit import limiter
from app.db.session import check_db, engine
from app.services.cache import close_redis, get_redis

logger = logging.getLogger(__name__)

if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        traces_sample_rate=0.2,
        environment="development" if settings.DEBUG else "production",
        send_default_pii=False,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.getLogger("jrclaw").info("%s API starting", settings.APP_NAME)
    await check_db()
    await get_redis()
    yield
    await close_redis()
    await engine.dispose()


app = FastAPI(
    title="JRCLaw API",
    version="0.1.0",
    description=(
        "API do JRCLaw: cálculo de prazos processuais (CPC/2015), calendário de "
        "feriados forenses e controle de acesso por papéis."
    ),
    lifespan=lifespan,
    openapi_tags=[
        {"name": "deadlines", "description": "Cálculo de prazos e dias úteis"},
        {"name": "holidays", "description": "Feriados nacionais, estaduais e forenses"},
        {"name": "auth", "description": "Permissões do usuário autenticado"},
        {"name": "team", "description": "Permissões do módulo de gestão de equipe"},
        {"name": "admin", "description": "Operações administrativas"},
    ],
)

app.state.limiter = limiter


# --------------- Exception Handlers ---------------

async def _app_error_handler(_request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_dict()))


async def _validation_error_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={
            "error": {
                "code": "VALIDATION_ERROR",
                "message": "Dados de entrada inválidos",
                "details": jsonable_encoder(exc.errors()),
            }
        },
    )


# Sync: SlowAPIMiddleware invokes this handler directly, without awaiting it.
def _rate_limit_handler(_request: Request, exc: RateLimitExceeded) -> JSONResponse:
    err = RateLimitError(details={"limit": exc.detail})
    return JSONResponse(status_code=err.status_code, content=jsonable_encoder(err.to_dict()))


async def _generic_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error: %s", exc)
    return JSONResponse(
        status_code=500,
        content={"error": {"code": "INTERNAL_ERROR", "message": "Erro interno do servidor"}},
    )


app.add_exception_handler(AppError, _app_error_handler)  # type: ignore[arg-type]
app.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]
app.add_exception_handler(RateLimitExceeded, _rate_limit_handler)
app.add_exception_handler(Exception, _generic_error_handler)  # type: ignore[arg-type]


# --------------- Security Headers Middleware ---------------

class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


# --------------- Middleware Stack ---------------

app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(RequestContextMiddleware)

app.include_router(api_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    return {"status": "ok", "service": settings.APP_NAME}


@app.get("/health/ready")
async def readiness_check():
    if not await check_db():
        raise ServiceUnavailableError("Banco de dados")
    return {"status": "ready", "service": settings.APP_NAME}
