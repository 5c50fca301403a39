"""Aggregates per-chunk scores into per-model results and an ensemble verdict."""
from statistics import fmean
from typing import Any

from textcheck.core.config import DetectorConfig
from textcheck.dtos.detection_dto import (
    LIKELY_AI,
    LIKELY_HUMAN,
    UNCERTAIN,
    ChunkScoreDTO,
    EnsembleAggregateDTO,
    LabeledCandidateDTO,
    ModelResultDTO,
    VerdictDTO,
    VerdictLabel,
)
from textcheck.utils.score_extractor import to_percent

_DISCLAIMER = "This is a statistical estimate, not a cryptographic proof."
ENSEMBLE_EXPLANATIONS: dict[VerdictLabel, str] = {
    LIKELY_AI: f"Ensemble of detectors leans AI-generated. {_DISCLAIMER}",
    LIKELY_HUMAN: f"Ensemble of detectors leans human-written. {_DISCLAIMER}",
    UNCERTAIN: f"Ensemble signals are mixed. {_DISCLAIMER}",
}


def aggregate_model_chunks(
    model: str,
    chunk_scores: list[ChunkScoreDTO | None],
    latency_ms: int,
    raw_result: Any = None,
) -> ModelResultDTO:
    """Combine one model's per-chunk scores into a model-level result.

    AI score is the max over chunks so that a single AI-like span flags the text;
    human score is the mean over chunks. Chunks without candidates are skipped.
    """
    scored = [s for s in chunk_scores if s is not None]
    ai_chunk_scores = [s.ai_score for s in scored]
    human_chunk_scores = [s.human_score for s in scored]
    candidates: list[LabeledCandidateDTO] = scored[-1].candidates if scored else []

    return ModelResultDTO(
        model=model,
        latency_ms=latency_ms,
        ai_score=max(ai_chunk_scores, default=0.0),
        human_score=fmean(human_chunk_scores) if human_chunk_scores else 0.0,
        candidates=list(candidates),
        ai_chunk_scores=ai_chunk_scores,
        human_chunk_scores=human_chunk_scores,
        raw_result=raw_result,
    )


def failed_model_result(model: str, latency_ms: int, error: str) -> ModelResultDTO:
    return ModelResultDTO(
        model=model,
        latency_ms=latency_ms,
        ai_score=0.0,
        human_score=0.0,
        error=error,
    )


def aggregate_ensemble(
    results: list[ModelResultDTO],
    settings: DetectorConfig,
) -> tuple[EnsembleAggregateDTO, VerdictDTO] | None:
    """Combine model results into ensemble scores and a provisional verdict.

    Only models that produced at least one candidate take part. Returns ``None``
    when no model did.
    """
    valid = [r for r in results if r.candidates]
    if not valid:
        return None

    aggregate = EnsembleAggregateDTO(
        agg_ai=fmean(r.ai_score for r in valid),
        agg_human=fmean(r.human_score for r in valid),
        max_chunk_ai=max(max(r.ai_chunk_scores, default=0.0) for r in valid),
    )
    max_score = max(aggregate.agg_ai, aggregate.agg_human, aggregate.max_chunk_ai)
    margin = abs(aggregate.ai_side - aggregate.agg_human)

    # A single chunk over the threshold decides regardless of the averages
    if aggregate.max_chunk_ai >= settings.ai_chunk_threshold:
        label = LIKELY_AI
    elif max_score < settings.min_max_score or margin < settings.min_margin:
        label = UNCERTAIN
    elif aggregate.ai_side > aggregate.agg_human:
        label = LIKELY_AI
    else:
        label = LIKELY_HUMAN

    verdict = VerdictDTO(
        label=label,
        confidence=to_percent(max_score),
        explanation=ENSEMBLE_EXPLANATIONS[label],
    )
    return aggregate, verdict
