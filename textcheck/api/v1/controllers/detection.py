from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter

from textcheck.api.v1.schemas.detection import (
    Aggregate,
    Candidate,
    CheckRequest,
    CheckResponse,
    ModelResult,
    TieBreaker,
)
from textcheck.dtos.detection_dto import DetectionInputDTO, DetectionResultDTO, ModelResultDTO
from textcheck.services.detection_service import DetectionService

router = APIRouter(
    route_class=DishkaRoute,
    prefix="/api",
    tags=["Detection"],
)


def _to_model_result(result: ModelResultDTO) -> ModelResult:
    fields = dict(
        model=result.model,
        latency_ms=result.latency_ms,
        top_label=result.top_label,
        top_score=result.top_score,
        ai_score=result.ai_score,
        human_score=result.human_score,
        candidates=[Candidate(label=c.label, score=c.score) for c in result.candidates],
        raw_result=result.raw_result,
    )
    if result.error is not None:
        fields["error"] = result.error
    else:
        fields["ai_chunk_scores"] = result.ai_chunk_scores
        fields["human_chunk_scores"] = result.human_chunk_scores
    return ModelResult(**fields)


def _to_response(result: DetectionResultDTO) -> CheckResponse:
    fields = dict(
        label=result.verdict.label,
        confidence=result.verdict.confidence,
        explanation=result.verdict.explanation,
        provider=result.provider,
        latency_ms=result.latency_ms,
        elapsed_ms=result.elapsed_ms,
    )
    if result.mode == "ensemble":
        tie = result.tie_breaker
        fields.update(
            mode=result.mode,
            models=result.models,
            aggregate=Aggregate(
                agg_ai=result.aggregate.agg_ai,
                agg_human=result.aggregate.agg_human,
                max_chunk_ai=result.aggregate.max_chunk_ai,
            ),
            per_model=[_to_model_result(r) for r in result.per_model],
            tie_breaker=TieBreaker(
                provider=tie.provider,
                label=tie.label,
                confidence=tie.confidence,
                explanation=tie.explanation,
            ) if tie else None,
        )
    else:
        fields["model"] = result.model
    return CheckResponse(**fields)


@router.post(
    "/check",
    response_model=CheckResponse,
    response_model_exclude_unset=True,
)
async def check_text(
    request: CheckRequest,
    service: FromDishka[DetectionService],
) -> CheckResponse:
    """Estimate whether the provided text is human-written or AI-generated."""
    result = await service.detect(DetectionInputDTO(text=request.text))
    return _to_response(result)
