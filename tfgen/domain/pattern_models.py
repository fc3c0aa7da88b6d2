"""
Domain models for rule-based Terraform synthesis.
Defines patterns, fragments, extracted parameters and generation results.
"""
from typing import Callable, Dict, Any, List, Optional, Tuple
from dataclasses import dataclass, field


GENERATED_BY_LLM = "llm-backend"
GENERATED_BY_RULES = "rule-engine"
GENERATED_BY_RAW = "raw-fallback"

GENERATED_BY_VALUES = (GENERATED_BY_LLM, GENERATED_BY_RULES, GENERATED_BY_RAW)


@dataclass(frozen=True)
class Params:
    """Scalars extracted from the description and the catalog lookups."""
    region: str
    name_suffix: str
    size: str = "micro"
    instance_type: str = "t3.micro"
    image_id: Optional[str] = None
    engine: str = "mysql"
    engine_version: str = "8.0"
    engine_port: int = 3306


@dataclass(frozen=True)
class Fragment:
    """A self-contained slice of HCL plus its plain-language explanation."""
    code: str
    explanation: str
    pattern_id: str = ""


@dataclass(frozen=True)
class Pattern:
    """
    One detectable infrastructure intent.

    Patterns are plain records: matching reads `keywords`, parameter
    extraction and generation are pure functions with no captured state.
    """
    id: str
    keywords: Tuple[str, ...]
    extract_params: Callable[[str, Params], Params]
    generate: Callable[[Params], Fragment]
    needs_image: bool = False

    def matches(self, text: str) -> bool:
        """Case-insensitive substring match against any trigger keyword."""
        lowered = text.lower()
        return any(keyword in lowered for keyword in self.keywords)


@dataclass(frozen=True)
class GeneratedDocument:
    """
    The composed configuration for one request.

    Created once by the composer and never modified afterwards.
    """
    region: str
    code: str
    fragments: Tuple[Fragment, ...] = ()
    network_only: bool = False

    @property
    def pattern_ids(self) -> List[str]:
        return [fragment.pattern_id for fragment in self.fragments if fragment.pattern_id]


@dataclass
class GenerationResult:
    """Result of a generate() call, tagged with the path that produced it."""
    code: str
    explanation: str
    generated_by: str
    region: str
    detected: List[str] = field(default_factory=list)

    def __post_init__(self):
        if self.generated_by not in GENERATED_BY_VALUES:
            raise ValueError(f"Unknown generation path: {self.generated_by}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "terraform": self.code,
            "explanation": self.explanation,
            "generatedBy": self.generated_by,
            "region": self.region,
            "detected": list(self.detected),
        }
