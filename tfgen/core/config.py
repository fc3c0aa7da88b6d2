"""
Configuration module for loading environment variables.
All secrets and configuration values are loaded from the environment.
"""
import os
from typing import List


def _split_list(value: str) -> List[str]:
    """Split a comma-separated environment value into a clean list."""
    return [item.strip() for item in value.split(",") if item.strip()]


class Config:
    """Application configuration loaded from environment variables."""

    # AWS Configuration
    AWS_DEFAULT_REGION: str = (
        os.getenv("AWS_DEFAULT_REGION") or os.getenv("AWS_REGION") or "eu-central-1"
    )
    # Used when the EC2 region catalog cannot be fetched
    FALLBACK_REGIONS: List[str] = _split_list(
        os.getenv("FALLBACK_REGIONS", "us-west-2,us-east-1,eu-west-1,eu-central-1")
    )
    DEFAULT_AMI_ID: str = os.getenv("DEFAULT_AMI_ID", "ami-0c02fb55956c7d316")
    DEFAULT_AMI_NAME: str = "Amazon Linux 2 (default)"
    AWS_LOOKUP_TIMEOUT: float = float(os.getenv("AWS_LOOKUP_TIMEOUT", "10"))

    # LLM backend Configuration
    LLM_ENABLED: bool = os.getenv("LLM_ENABLED", "true").lower() in ("1", "true", "yes")
    LLM_TIMEOUT: float = float(os.getenv("LLM_TIMEOUT", "90"))

    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    OPENAI_API_BASE_URL: str = os.getenv("OPENAI_API_BASE_URL", "https://api.openai.com/v1")
    OPENAI_TIMEOUT: int = int(os.getenv("OPENAI_TIMEOUT", "60"))
    OPENAI_MAX_TOKENS: int = int(os.getenv("OPENAI_MAX_TOKENS", "4000"))

    MISTRAL_API_KEY: str = os.getenv("MISTRAL_API_KEY", "")
    MISTRAL_MODEL: str = os.getenv("MISTRAL_MODEL", "mistral-large-latest")
    MISTRAL_API_BASE_URL: str = os.getenv("MISTRAL_API_BASE_URL", "https://api.mistral.ai/v1")
    MISTRAL_TIMEOUT: int = int(os.getenv("MISTRAL_TIMEOUT", "60"))
    MISTRAL_MAX_TOKENS: int = int(os.getenv("MISTRAL_MAX_TOKENS", "4000"))

    # Cost Estimation Configuration
    HOURS_PER_MONTH: int = int(os.getenv("HOURS_PER_MONTH", "730"))

    # Documentation Configuration
    # Delay before re-deriving documentation, lets the UI show its loading state
    DOCS_RENDER_DELAY_SECONDS: float = float(os.getenv("DOCS_RENDER_DELAY_SECONDS", "0.5"))

    # Request limits
    MAX_DESCRIPTION_LENGTH: int = int(os.getenv("MAX_DESCRIPTION_LENGTH", "5000"))
    MAX_TERRAFORM_LENGTH: int = int(os.getenv("MAX_TERRAFORM_LENGTH", "512000"))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @classmethod
    def validate(cls) -> None:
        """
        Validates that required configuration values are set.

        Raises:
            ValueError: If any required configuration is missing or invalid.
        """
        if not cls.AWS_DEFAULT_REGION:
            raise ValueError("AWS_DEFAULT_REGION is required")
        if not cls.FALLBACK_REGIONS:
            raise ValueError("FALLBACK_REGIONS must contain at least one region")
        if not cls.DEFAULT_AMI_ID.startswith("ami-"):
            raise ValueError(
                f"DEFAULT_AMI_ID must be an AMI identifier (got: {cls.DEFAULT_AMI_ID})"
            )
        if cls.OPENAI_MAX_TOKENS <= 0 or cls.MISTRAL_MAX_TOKENS <= 0:
            raise ValueError("OPENAI_MAX_TOKENS and MISTRAL_MAX_TOKENS must be positive")
        if cls.DOCS_RENDER_DELAY_SECONDS < 0:
            raise ValueError("DOCS_RENDER_DELAY_SECONDS must not be negative")

        # Model names are required so that AI calls are well-defined.
        # API keys are optional: without them the rule engine is used.
        if not cls.OPENAI_MODEL:
            raise ValueError("OPENAI_MODEL is required")
        if not cls.MISTRAL_MODEL:
            raise ValueError("MISTRAL_MODEL is required")


config = Config()
