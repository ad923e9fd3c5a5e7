from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from renobid.api.middleware import RequestLogMiddleware
from renobid.api.v1.router import v1_router
from renobid.common.exceptions import RenobidException
from renobid.common.logging import get_logger, setup_logging
from renobid.config import settings
from renobid.integrations import EmailClient, SMSClient

logger = get_logger("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("Renobid API starting (env=%s)", settings.APP_ENV)
    yield


app = FastAPI(
    title="Renobid API",
    description="Renovation bidding marketplace: bid lifecycle and review",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS
origins = settings.ALLOWED_ORIGINS.split(",") if settings.ALLOWED_ORIGINS != "*" else ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLogMiddleware)


@app.exception_handler(RenobidException)
async def renobid_exception_handler(request: Request, exc: RenobidException):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"code": exc.code, "detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


app.include_router(v1_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    integrations = {client.name: await client.health_check() for client in (EmailClient(), SMSClient())}
    return {
        "status": "healthy",
        "service": "renobid",
        "version": "1.0.0",
        "env": settings.APP_ENV,
        "integrations": integrations,
    }
