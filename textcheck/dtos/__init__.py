"""
Data Transfer Objects (DTOs) package.

DTOs are simple dataclasses used to transfer data between layers.
"""

from textcheck.dtos.detection_dto import (
    LIKELY_AI,
    LIKELY_HUMAN,
    UNCERTAIN,
    ChunkDTO,
    ChunkScoreDTO,
    DetectionInputDTO,
    DetectionResultDTO,
    EnsembleAggregateDTO,
    LabeledCandidateDTO,
    ModelResultDTO,
    TieBreakResultDTO,
    VerdictDTO,
    VerdictLabel,
)

__all__ = [
    "LIKELY_AI",
    "LIKELY_HUMAN",
    "UNCERTAIN",
    "ChunkDTO",
    "ChunkScoreDTO",
    "DetectionInputDTO",
    "DetectionResultDTO",
    "EnsembleAggregateDTO",
    "LabeledCandidateDTO",
    "ModelResultDTO",
    "TieBreakResultDTO",
    "VerdictDTO",
    "VerdictLabel",
]
