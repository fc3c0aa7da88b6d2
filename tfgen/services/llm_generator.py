"""
LLM-backed Terraform generation using OpenAI with Mistral fallback.
"""
from typing import Dict, List, Optional, Tuple
import logging
import re

from tfgen.core.config import config
from tfgen.services.llm_clients import ChatCompletionClient, LLMAPIError, MistralClient, OpenAIClient


logger = logging.getLogger(__name__)

CODE_FENCE = re.compile(r"^```[a-zA-Z]*\s*\n(?P<body>.*?)\n?```\s*$", re.DOTALL)
PROVIDER_BLOCK = re.compile(r'provider\s+"aws"')

FALLBACK_EXPLANATION = "Generated by the AI backend. Review the configuration before applying it."


class LLMGenerationError(Exception):
    """Raised when no backend produced usable Terraform."""
    pass


def build_generation_prompt(description: str, region: str) -> str:
    return f"""You are an expert AWS infrastructure architect and Terraform specialist.
Generate Terraform code based on this natural language description: "{description}"

Requirements:
- Use AWS provider version ~> 5.0
- Set region to {region}
- Include proper resource naming and tags
- Add comments explaining each resource
- Follow Terraform best practices
- Include any necessary data sources
- Use appropriate instance types and configurations
- Include security groups, IAM roles if needed
- Never hardcode passwords or secrets

Respond with valid Terraform HCL code only. Do not include explanations outside of code comments."""


def build_explanation_prompt(code: str) -> str:
    return f"""Explain what this Terraform infrastructure does in simple terms for a developer:

{code}

Provide a clear, concise explanation of:
1. What AWS resources are being created
2. How they work together
3. What the infrastructure will accomplish
4. Any important security or cost considerations

Keep it under 200 words and use bullet points where helpful."""


def strip_code_fences(content: str) -> str:
    """Remove a surrounding markdown code fence, if any."""
    content = content.strip()
    match = CODE_FENCE.match(content)
    if match:
        return match.group("body").strip()
    return content


def _message_content(response: Dict) -> str:
    choices = response.get("choices") or []
    if not isinstance(choices, list) or not choices:
        raise LLMGenerationError("Empty response from AI backend")
    choice = choices[0] if isinstance(choices[0], dict) else {}
    message = choice.get("message") or {}
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str) or not content:
        raise LLMGenerationError("No content in AI backend response")
    return content


class TerraformLLMGenerator:
    """Generates Terraform from a description with an OpenAI -> Mistral chain."""

    def __init__(
        self,
        openai_client: Optional[ChatCompletionClient] = None,
        mistral_client: Optional[ChatCompletionClient] = None
    ):
        self.clients: List[ChatCompletionClient] = [
            openai_client or OpenAIClient(),
            mistral_client or MistralClient(),
        ]
        self.last_used_provider: Optional[str] = None

    def is_configured(self) -> bool:
        """True when at least one backend has an API key."""
        return config.LLM_ENABLED and any(client.is_configured for client in self.clients)

    async def _complete(self, prompt: str, max_tokens: Optional[int] = None) -> Tuple[str, str]:
        """Return (content, provider) from the first backend that answers."""
        messages = [{"role": "user", "content": prompt}]
        errors = []
        for client in self.clients:
            if not client.is_configured:
                continue
            try:
                logger.info("Attempting Terraform generation with %s", client.provider)
                response = await client.chat_completion(messages=messages, max_tokens=max_tokens)
                return _message_content(response), client.provider
            except (LLMAPIError, LLMGenerationError) as error:
                logger.warning("%s failed: %s", client.provider, error)
                errors.append(f"{client.provider}: {error}")

        if not errors:
            raise LLMGenerationError("No AI backend is configured")
        raise LLMGenerationError("All AI backends failed (" + "; ".join(errors) + ")")

    async def generate(self, description: str, region: str) -> Tuple[str, str]:
        """
        Generate Terraform and a plain-language explanation.

        Args:
            description: Free-text infrastructure description
            region: Region the provider block must be bound to

        Returns:
            (terraform code, explanation)

        Raises:
            LLMGenerationError: If no backend returns code with an AWS provider block
        """
        content, provider = await self._complete(build_generation_prompt(description, region))
        code = strip_code_fences(content)
        if not PROVIDER_BLOCK.search(code):
            raise LLMGenerationError(f"{provider} response has no AWS provider block")
        self.last_used_provider = provider

        try:
            explanation, _ = await self._complete(build_explanation_prompt(code), max_tokens=1000)
        except LLMGenerationError as error:
            logger.warning("Explanation request failed, using default text: %s", error)
            explanation = FALLBACK_EXPLANATION

        logger.info("Generated Terraform with %s (%d chars)", provider, len(code))
        return code, strip_code_fences(explanation)
