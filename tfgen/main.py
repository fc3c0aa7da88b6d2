"""
Main FastAPI application bootstrap.
Configures logging, middleware and routers.
"""
import logging

from fastapi import FastAPI

from tfgen.api.generate import router as generate_router
from tfgen.core.config import config
from tfgen.middleware.request_size_limiter import RequestSizeLimiterMiddleware
from tfgen.middleware.security_headers import SecurityHeadersMiddleware


logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Validate configuration on startup
try:
    config.validate()
except ValueError as error:
    raise RuntimeError(f"Configuration error: {error}") from error

logger.info(
    "Starting with default region=%s, LLM backend %s",
    config.AWS_DEFAULT_REGION,
    "enabled" if config.LLM_ENABLED else "disabled",
)


app = FastAPI(
    title="Terraform Generator",
    description="Natural-language to Terraform generation with documentation and cost estimates",
    version="2.0.0",
)

app.add_middleware(RequestSizeLimiterMiddleware)
app.add_middleware(SecurityHeadersMiddleware)

app.include_router(generate_router)
