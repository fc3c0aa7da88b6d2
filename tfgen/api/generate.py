"""
API routes for Terraform generation, documentation and AWS lookups.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from tfgen.core.account_context import account_cache
from tfgen.services.catalog_lookup import CatalogLookup
from tfgen.services.documentation import DocumentationService
from tfgen.services.generator import EmptyInputError, TerraformGenerator
from tfgen.services.templates import list_templates


logger = logging.getLogger(__name__)
router = APIRouter()

SERVICE_VERSION = "2.0.0"
SERVICE_FEATURES = [
    "AWS SDK (boto3)",
    "Template System",
    "Rule-based Generation",
    "Documentation Generation",
    "Tiered Cost Estimation",
    "LLM Integration (OpenAI, Mistral)",
]


class GenerateTerraformRequest(BaseModel):
    """Request model for Terraform generation."""
    description: str = Field(..., description="Natural-language infrastructure description")
    region: Optional[str] = Field(None, description="Optional target region")


class DocumentationRequest(BaseModel):
    """Request model for documentation of generated Terraform."""
    terraform: str = Field(..., description="Generated Terraform configuration")


@router.get("/api/health")
async def health() -> Dict[str, Any]:
    return {
        "status": "healthy",
        "version": SERVICE_VERSION,
        "features": SERVICE_FEATURES,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/api/aws-status")
async def aws_status() -> Dict[str, Any]:
    """
    Check the configured AWS credentials.

    A successful check becomes the last known account and region used as
    the default for later generation requests.
    """
    context = await CatalogLookup().account_identity()
    if not context.connected:
        return {"connected": False, "error": "AWS credentials unavailable or invalid"}

    account_cache.update(context)
    return {"connected": True, "account": context.account, "region": context.region}


@router.get("/api/regions")
async def regions() -> List[str]:
    return await CatalogLookup().list_regions()


@router.get("/api/ami/{region}")
async def latest_ami(region: str) -> Dict[str, str]:
    return await CatalogLookup().latest_image(region)


@router.get("/api/templates")
async def templates() -> Dict[str, Any]:
    return {"templates": list_templates()}


@router.post("/api/generate-terraform")
async def generate_terraform(generate_request: GenerateTerraformRequest) -> Dict[str, Any]:
    """
    Generate Terraform from a natural-language description.

    Args:
        generate_request: Request body with description and optional region

    Returns:
        JSON response with terraform, explanation, generatedBy and region

    Raises:
        HTTPException: 400 for a blank description, 500 for unexpected errors
    """
    try:
        logger.info("generate_terraform: Stage=start - Received generation request")
        generator = TerraformGenerator()
        result = await generator.generate(
            generate_request.description,
            region=generate_request.region,
            context=account_cache.get(),
        )
        logger.info(
            "generate_terraform: Stage=done - generatedBy=%s region=%s",
            result.generated_by,
            result.region,
        )
        return result.to_dict()

    except EmptyInputError as error:
        raise HTTPException(status_code=400, detail=str(error)) from error
    except HTTPException:
        raise
    except Exception as error:
        logger.error("generate_terraform: Stage=error - %s", error, exc_info=True)
        raise HTTPException(
            status_code=500,
            detail="An unexpected error occurred while generating Terraform"
        ) from error


@router.post("/api/documentation")
async def documentation(documentation_request: DocumentationRequest) -> Dict[str, Any]:
    """
    Build documentation, diagram and cost estimate for generated Terraform.

    Raises:
        HTTPException: 400 for blank input, 500 for unexpected errors
    """
    if not documentation_request.terraform.strip():
        raise HTTPException(status_code=400, detail="Terraform configuration is required")

    try:
        logger.info("documentation: Stage=start - Building documentation")
        bundle = await DocumentationService().build_deferred(documentation_request.terraform)
        return {"status": "ok", "documentation": bundle}
    except Exception as error:
        logger.error("documentation: Stage=error - %s", error, exc_info=True)
        raise HTTPException(
            status_code=500,
            detail="An unexpected error occurred while building documentation"
        ) from error
