"""
API routes for cost component estimation.
"""
from typing import Any, Dict, List
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field
import logging

from plancost.core.config import config
from plancost.providers.registry import default_registry
from plancost.services.resource_estimator import ResourceEstimator
from plancost.services.resource_loader import ResourceLoaderError, load_resources, load_usage


logger = logging.getLogger(__name__)
router = APIRouter()


class ResourceInput(BaseModel):
    """Model for a single planned resource instance."""
    address: str = Field(..., description="Unique resource address (e.g. aws_instance.web[0])")
    type: str = Field(..., description="Terraform resource type")
    values: Dict[str, Any] = Field(default_factory=dict, description="Planned attribute values")
    references: Dict[str, List[str]] = Field(
        default_factory=dict,
        description="Referenced resource addresses keyed by attribute name",
    )


class EstimateRequest(BaseModel):
    """Request model for cost component estimation."""
    resources: List[ResourceInput] = Field(..., description="Planned resource instances")
    usage: Dict[str, Dict[str, Any]] = Field(
        default_factory=dict,
        description="Usage estimates keyed by resource address",
    )


@router.post("/api/estimate")
async def estimate_resources(estimate_request: EstimateRequest) -> Dict[str, Any]:
    """
    Map planned resources and usage estimates to cost components.

    Args:
        estimate_request: Request body with resources and usage

    Returns:
        JSON response with resources and skipped resources

    Raises:
        HTTPException: If the request is too large, the input is malformed,
                       or an unexpected error occurs
    """
    if len(estimate_request.resources) > config.MAX_RESOURCES_PER_REQUEST:
        raise HTTPException(
            status_code=413,
            detail=f"Too many resources (maximum {config.MAX_RESOURCES_PER_REQUEST})"
        )

    try:
        registry = default_registry()
        try:
            resources = load_resources(
                [resource.model_dump() for resource in estimate_request.resources],
                registry,
            )
            usage = load_usage(estimate_request.usage)
        except ResourceLoaderError as error:
            raise HTTPException(
                status_code=400,
                detail=f"Invalid estimate input: {str(error)}"
            ) from error

        estimator = ResourceEstimator(registry=registry)
        result = estimator.estimate(resources, usage)

        return {
            "status": "ok",
            "estimate": result.to_dict(),
        }

    except HTTPException:
        # Re-raise HTTP exceptions as-is
        raise
    except Exception as error:
        logger.error(f"Unexpected error estimating resources: {type(error).__name__}: {error}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail="An unexpected error occurred while estimating resources"
        ) from error


@router.get("/api/resource-types")
async def list_resource_types() -> Dict[str, Any]:
    """
    List supported, free and usage-only resource types.

    Returns:
        JSON response with the registry description
    """
    return {
        "status": "ok",
        **default_registry().describe(),
    }
