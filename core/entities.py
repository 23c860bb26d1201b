# core/entities.py
from dataclasses import asdict, dataclass, field
from typing import Any, ClassVar, Literal, Optional, Tuple, Union
from util.enums import ProviderErrorKind

Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    content: str


@dataclass(frozen=True)
class GenerationOptions:
    model: Optional[str] = None  # None -> provider default
    temperature: float = 0.7
    max_output_tokens: int = 1000


@dataclass(frozen=True)
class TokenUsage:
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass(frozen=True)
class CandidateAnswer:
    ok: ClassVar[bool] = True

    text: str
    provider_id: str
    model_id: Optional[str] = None
    usage: TokenUsage = field(default_factory=TokenUsage)


@dataclass(frozen=True)
class ProviderError:
    ok: ClassVar[bool] = False

    message: str
    provider_id: str
    kind: ProviderErrorKind = ProviderErrorKind.TRANSPORT
    status_code: Optional[int] = None


ProviderResult = Union[CandidateAnswer, ProviderError]


@dataclass(frozen=True)
class ConnectionCheck:
    ok: bool
    provider_id: str
    detail: dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None


@dataclass(frozen=True)
class ReferenceEntry:
    """
    Ground truth for verification. `canonical_meaning` may hold several
    comma-separated senses ("hello, greeting, salutation").
    """

    headword: str
    canonical_meaning: str
    native_script: Optional[str] = None


@dataclass(frozen=True)
class VerificationResult:
    headword: str
    canonical_meaning: str
    candidate_text: str
    matched_tokens: Tuple[str, ...]
    matched_count: int
    total_words: int
    match_percentage: int
    is_accurate: bool
    script_match: Optional[bool] = None
    word_match: Optional[bool] = None

    def to_dict(self) -> dict[str, Any]:
        out = asdict(self)
        out["matched_tokens"] = list(self.matched_tokens)
        return out
