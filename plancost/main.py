"""
Main FastAPI application bootstrap.
Validates configuration and includes routers.
"""
import logging

from fastapi import FastAPI

from plancost.core.config import config
from plancost.api.estimate import router as estimate_router


logger = logging.getLogger(__name__)

# Validate configuration on startup
try:
    config.validate()
except ValueError as error:
    raise RuntimeError(f"Configuration error: {error}") from error

logger.info(
    "Estimation defaults: volume_type=%s, volume_size_gb=%s, max_resources_per_request=%s",
    config.DEFAULT_VOLUME_TYPE,
    config.DEFAULT_VOLUME_SIZE_GB,
    config.MAX_RESOURCES_PER_REQUEST,
)


app = FastAPI(
    title="plancost",
    description="Maps Terraform resources and usage estimates to priceable cost components",
)

# Include routers
app.include_router(estimate_router)

