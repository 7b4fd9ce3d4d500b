import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi import _rate_limit_exceeded_handler
import sentry_sdk

from jdmatch.api.v1.health import router as health_router
from jdmatch.api.v1.analyze import router as analyze_router
from jdmatch.api.v1.sessions import router as sessions_router
from jdmatch.core.cors import cors_allow_origin_regex, cors_allowed_origins
from jdmatch.core.rate_limit import limiter
from jdmatch.core.config import settings
from dotenv import load_dotenv
from jdmatch.core.lifespan import lifespan

load_dotenv()
logging.basicConfig(level=settings.log_level, format="%(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

app = FastAPI(title="JD-Match API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_allowed_origins(),
    allow_origin_regex=cors_allow_origin_regex(),
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

app.include_router(health_router, prefix="/v1", tags=["Health"])
app.include_router(analyze_router, prefix="/v1", tags=["Analyze"])
app.include_router(sessions_router, prefix="/v1", tags=["Sessions"])
