from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, StrictStr, field_validator
from pydantic.alias_generators import to_camel

MIN_TEXT_LENGTH = 20
TEXT_TOO_SHORT_MSG = f"Please provide at least {MIN_TEXT_LENGTH} characters of text."

Label = Literal["likely_human", "likely_ai", "uncertain"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CheckRequest(BaseModel):
    text: StrictStr

    @field_validator("text")
    @classmethod
    def validate_length(cls, v: str) -> str:
        if len(v.strip()) < MIN_TEXT_LENGTH:
            raise ValueError(TEXT_TOO_SHORT_MSG)
        return v


class Candidate(CamelModel):
    label: str
    score: float


class ModelResult(CamelModel):
    model: str
    latency_ms: int
    top_label: str | None
    top_score: float | None
    ai_score: float
    human_score: float
    candidates: list[Candidate]
    raw_result: Any = None
    ai_chunk_scores: list[float] = []
    human_chunk_scores: list[float] = []
    error: str | None = None


class Aggregate(CamelModel):
    agg_ai: float
    agg_human: float
    max_chunk_ai: float


class TieBreaker(CamelModel):
    provider: str
    label: Label
    confidence: float
    explanation: str


class CheckResponse(CamelModel):
    label: Label
    confidence: int
    explanation: str
    provider: Literal["huggingface", "openai"]
    mode: Literal["ensemble"] | None = None
    models: list[str] | None = None
    model: str | None = None
    latency_ms: int
    elapsed_ms: int
    aggregate: Aggregate | None = None
    per_model: list[ModelResult] | None = None
    tie_breaker: TieBreaker | None = None
