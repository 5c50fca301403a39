from dataclasses import dataclass, field
from typing import Any, Literal

VerdictLabel = Literal["likely_human", "likely_ai", "uncertain"]

LIKELY_HUMAN: VerdictLabel = "likely_human"
LIKELY_AI: VerdictLabel = "likely_ai"
UNCERTAIN: VerdictLabel = "uncertain"


@dataclass(frozen=True)
class ChunkDTO:
    offset: int
    text: str


@dataclass(frozen=True)
class LabeledCandidateDTO:
    label: str
    score: float


@dataclass(frozen=True)
class ChunkScoreDTO:
    ai_score: float
    human_score: float
    candidates: list[LabeledCandidateDTO] = field(default_factory=list)


@dataclass
class ModelResultDTO:
    model: str
    latency_ms: int
    ai_score: float
    human_score: float
    candidates: list[LabeledCandidateDTO] = field(default_factory=list)
    ai_chunk_scores: list[float] = field(default_factory=list)
    human_chunk_scores: list[float] = field(default_factory=list)
    raw_result: Any = None
    error: str | None = None

    @property
    def top_label(self) -> str | None:
        return self.candidates[0].label if self.candidates else None

    @property
    def top_score(self) -> float | None:
        return self.candidates[0].score if self.candidates else None


@dataclass(frozen=True)
class EnsembleAggregateDTO:
    agg_ai: float
    agg_human: float
    max_chunk_ai: float

    @property
    def ai_side(self) -> float:
        """Strongest AI-leaning signal: the mean or the worst single chunk."""
        return max(self.agg_ai, self.max_chunk_ai)


@dataclass(frozen=True)
class VerdictDTO:
    label: VerdictLabel
    confidence: int
    explanation: str


@dataclass(frozen=True)
class TieBreakResultDTO:
    label: VerdictLabel
    confidence: float
    explanation: str
    provider: str = "openai"


@dataclass(frozen=True)
class DetectionInputDTO:
    text: str


@dataclass
class DetectionResultDTO:
    verdict: VerdictDTO
    provider: str
    latency_ms: int
    mode: str | None = None
    models: list[str] | None = None
    model: str | None = None
    aggregate: EnsembleAggregateDTO | None = None
    per_model: list[ModelResultDTO] | None = None
    tie_breaker: TieBreakResultDTO | None = None
    # wall time of the whole detection; latency_ms sums per-model times
    elapsed_ms: int = 0
