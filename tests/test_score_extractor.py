"""Tests for classifier output normalization."""

import pytest

from textcheck.dtos.detection_dto import LabeledCandidateDTO
from textcheck.utils.score_extractor import (
    LabelMapping,
    extract_chunk_score,
    flatten_candidates,
    to_percent,
)


@pytest.fixture
def mapping():
    return LabelMapping()


def test_flatten_nested_output_sorted_by_score():
    raw = [[{"label": "Fake", "score": 0.2}, {"label": "Real", "score": 0.8}]]

    candidates = flatten_candidates(raw)

    assert [c.label for c in candidates] == ["Real", "Fake"]


def test_flatten_mixed_flat_and_nested():
    raw = [{"label": "Human", "score": 0.4}, [{"label": "ChatGPT", "score": 0.6}]]

    assert [c.label for c in flatten_candidates(raw)] == ["ChatGPT", "Human"]


@pytest.mark.parametrize(
    "raw",
    [
        None,
        {"error": "Model is currently loading"},
        "not a list",
        [],
        [{"label": 1, "score": 0.5}],
        [{"label": "Human", "score": "0.5"}],
        [{"label": "Human", "score": True}],
        [{"label": "Human", "score": float("nan")}],
        [[[{"label": "Human", "score": 0.5}]]],
    ],
)
def test_malformed_output_yields_no_candidates(raw):
    assert flatten_candidates(raw) == []


def test_candidate_scores_clamped():
    candidates = flatten_candidates([{"label": "Fake", "score": 1.7}, {"label": "Real", "score": -0.2}])

    assert [c.score for c in candidates] == [1.0, 0.0]


def test_ai_label_and_human_label(mapping):
    candidates = flatten_candidates([{"label": "ChatGPT", "score": 0.7}, {"label": "Human", "score": 0.3}])

    score = extract_chunk_score(candidates, mapping)

    assert score.ai_score == pytest.approx(0.7)
    assert score.human_score == pytest.approx(0.3)


def test_only_human_label_derives_ai_score(mapping):
    score = extract_chunk_score([LabeledCandidateDTO("Human", 0.9)], mapping)

    assert score.ai_score == pytest.approx(0.1)
    assert score.human_score == pytest.approx(0.9)


def test_human_score_defaults_to_complement(mapping):
    candidates = flatten_candidates([{"label": "Real", "score": 0.8}, {"label": "Fake", "score": 0.2}])

    score = extract_chunk_score(candidates, mapping)

    assert score.ai_score == pytest.approx(0.2)
    assert score.human_score == pytest.approx(0.8)


def test_unrecognized_labels_mean_no_ai_signal(mapping):
    score = extract_chunk_score([LabeledCandidateDTO("LABEL_0", 0.9)], mapping)

    assert score.ai_score == 0.0
    assert score.human_score == 1.0


def test_empty_candidates_contribute_nothing(mapping):
    assert extract_chunk_score([], mapping) is None


def test_bias_applies_to_ai_side_and_clamps(mapping):
    candidates = [LabeledCandidateDTO("machine-generated", 0.5)]

    boosted = extract_chunk_score(candidates, mapping, ai_multiplier=3.0)
    lowered = extract_chunk_score(candidates, mapping, ai_bias=-0.9)

    assert boosted.ai_score == 1.0
    assert lowered.ai_score == 0.0
    assert boosted.human_score == pytest.approx(0.5)


def test_custom_label_mapping():
    mapping = LabelMapping.from_tokens(["SYNTHETIC"], ["Organic"])
    candidates = [LabeledCandidateDTO("synthetic", 0.7), LabeledCandidateDTO("ORGANIC", 0.3)]

    score = extract_chunk_score(candidates, mapping)

    assert score.ai_score == pytest.approx(0.7)
    assert score.human_score == pytest.approx(0.3)


@pytest.mark.parametrize(
    "raw",
    [
        [{"label": "Human", "score": 0.0}],
        [{"label": "Human", "score": 1.0}],
        [{"label": "Fake", "score": 1.0}, {"label": "Human", "score": 1.0}],
        [{"label": "gpt2", "score": 0.33}, {"label": "llm", "score": 0.99}],
        [{"label": "other", "score": 0.5}],
    ],
)
def test_scores_always_in_unit_range(mapping, raw):
    score = extract_chunk_score(flatten_candidates(raw), mapping, ai_multiplier=2.0, ai_bias=0.5)

    assert 0.0 <= score.ai_score <= 1.0
    assert 0.0 <= score.human_score <= 1.0


@pytest.mark.parametrize(
    "value, expected",
    [(0.0, 0), (0.5, 50), (0.545, 55), (0.9, 90), (1.0, 100), (1.3, 100)],
)
def test_to_percent(value, expected):
    assert to_percent(value) == expected
