"""
Terraform generation pipeline.

LLM backend first when configured, then the rule engine (matcher, composer),
and finally a raw network-only document if the rule engine itself breaks.
"""
from typing import Optional
import asyncio
import logging

from tfgen.core.account_context import AccountContext
from tfgen.core.config import config
from tfgen.domain.pattern_models import (
    GENERATED_BY_LLM,
    GENERATED_BY_RAW,
    GENERATED_BY_RULES,
    GenerationResult,
)
from tfgen.services.catalog_lookup import CatalogLookup
from tfgen.services.composer import (
    DEFAULT_NETWORK_EXPLANATION,
    DEFAULT_NETWORK_FRAGMENT,
    compose,
    compose_explanation,
    render_preamble,
)
from tfgen.services.llm_generator import LLMGenerationError, TerraformLLMGenerator
from tfgen.services.pattern_catalog import (
    HARDCODED_DEFAULT_REGION,
    base_params,
    build_fragments,
    match_patterns,
)


logger = logging.getLogger(__name__)


class EmptyInputError(Exception):
    """Raised when the description is blank."""
    pass


class TerraformGenerator:
    """Turns a free-text description into a Terraform document."""

    def __init__(
        self,
        catalog: Optional[CatalogLookup] = None,
        llm_generator: Optional[TerraformLLMGenerator] = None,
        llm_timeout: Optional[float] = None
    ):
        self.catalog = catalog or CatalogLookup()
        self.llm_generator = llm_generator or TerraformLLMGenerator()
        self.llm_timeout = llm_timeout or config.LLM_TIMEOUT

    @staticmethod
    def _default_region(region: Optional[str], context: Optional[AccountContext]) -> str:
        if region:
            return region
        if context is not None and context.region:
            return context.region
        return HARDCODED_DEFAULT_REGION

    async def _rule_engine(self, description: str, known_regions, default_region: str) -> GenerationResult:
        match = match_patterns(description, known_regions, default_region)
        image_id = None
        if any(pattern.needs_image for pattern in match.patterns):
            image = await self.catalog.latest_image(match.region)
            image_id = image["ami"]

        params = base_params(description, match.region, image_id=image_id)
        fragments = build_fragments(description, match.patterns, params)
        document = compose(fragments, match.region)
        return GenerationResult(
            code=document.code,
            explanation=compose_explanation(document),
            generated_by=GENERATED_BY_RULES,
            region=match.region,
            detected=list(document.pattern_ids),
        )

    @staticmethod
    def _raw_fallback(region: str) -> GenerationResult:
        return GenerationResult(
            code=render_preamble(region) + DEFAULT_NETWORK_FRAGMENT,
            explanation=f"Region: {region}\n\n{DEFAULT_NETWORK_EXPLANATION}",
            generated_by=GENERATED_BY_RAW,
            region=region,
            detected=[],
        )

    async def generate(
        self,
        description: str,
        region: Optional[str] = None,
        context: Optional[AccountContext] = None
    ) -> GenerationResult:
        """
        Generate Terraform for a description.

        Args:
            description: Free-text infrastructure description
            region: Region explicitly requested by the caller
            context: Last known account/region, used as the default region

        Returns:
            GenerationResult; never fails once the input is non-blank

        Raises:
            EmptyInputError: If the description is blank
        """
        if not description or not description.strip():
            raise EmptyInputError("Please describe the infrastructure you want to create.")

        default_region = self._default_region(region, context)
        known_regions = await self.catalog.list_regions()

        if self.llm_generator.is_configured():
            target_region = match_patterns(description, known_regions, default_region).region
            try:
                code, explanation = await asyncio.wait_for(
                    self.llm_generator.generate(description, target_region),
                    timeout=self.llm_timeout,
                )
                return GenerationResult(
                    code=code,
                    explanation=explanation,
                    generated_by=GENERATED_BY_LLM,
                    region=target_region,
                    detected=[],
                )
            except LLMGenerationError as error:
                logger.warning("LLM generation failed, using rule engine: %s", error)
            except asyncio.TimeoutError:
                logger.warning("LLM generation timed out after %ss, using rule engine", self.llm_timeout)
            except Exception as error:
                logger.warning("Unexpected LLM backend error, using rule engine: %s", error, exc_info=True)

        try:
            return await self._rule_engine(description, known_regions, default_region)
        except Exception as error:
            logger.error("Rule engine failed, returning raw fallback: %s", error, exc_info=True)
            return self._raw_fallback(default_region)
