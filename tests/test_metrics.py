import itertools

import numpy as np
import pytest

from devperf_app.analytics.metrics.numeric import (
    clamp,
    coefficient_of_variation,
    mean_of_present,
    round_half_up,
)
from devperf_app.analytics.metrics.similarity import cosine_similarities, cosine_similarity
from devperf_app.analytics.metrics.trend import classify_trend


def _encoded_vectors():
    # Every vector the predictor can produce: severity rank 1..4 and three flags
    for rank, proj, dev, feat in itertools.product(range(1, 5), (0, 1), (0, 1), (0, 1)):
        yield [rank, proj, dev, feat]


def test_cosine_self_similarity_is_exactly_one():
    for vec in _encoded_vectors():
        assert cosine_similarity(vec, vec) == 1.0


def test_cosine_zero_magnitude_is_zero():
    assert cosine_similarity([0, 0, 0, 0], [4, 1, 1, 1]) == 0.0
    assert cosine_similarity([4, 1, 0, 0], [0, 0, 0, 0]) == 0.0


def test_cosine_bounded_for_non_negative_encoding():
    vectors = list(_encoded_vectors())
    for a, b in itertools.product(vectors, vectors):
        sim = cosine_similarity(a, b)
        assert 0.0 <= sim <= 1.0


def test_cosine_shape_mismatch():
    with pytest.raises(ValueError):
        cosine_similarity([1, 2], [1, 2, 3])


def test_vectorised_matches_scalar():
    vectors = list(_encoded_vectors())
    query = [3, 1, 0, 1]
    sims = cosine_similarities(query, np.array(vectors))
    assert sims.shape == (len(vectors),)
    for vec, sim in zip(vectors, sims):
        assert sim == pytest.approx(cosine_similarity(query, vec))
    assert cosine_similarities(query, np.array(vectors[5:6]))[0] == cosine_similarity(query, vectors[5])


def test_vectorised_handles_empty_and_zero_rows():
    assert cosine_similarities([1, 1, 0, 0], np.zeros((0, 4))).size == 0
    sims = cosine_similarities([1, 1, 0, 0], np.array([[0, 0, 0, 0], [1, 1, 0, 0]]))
    assert list(sims) == [0.0, 1.0]


def test_round_half_up():
    assert round_half_up(88.5) == 89
    assert round_half_up(24.5) == 25
    assert round_half_up(24.49) == 24
    assert round_half_up(0.125, 2) == 0.13
    assert round_half_up(0.5, 2) == 0.5


def test_clamp():
    assert clamp(1.3, 0.4, 0.95) == 0.95
    assert clamp(-2, 0.4, 0.95) == 0.4
    assert clamp(0.7, 0.4, 0.95) == 0.7


def test_mean_of_present_ignores_missing_values():
    assert mean_of_present([None, 4, 5]) == 4.5
    assert mean_of_present([float("nan"), 3]) == 3.0
    assert mean_of_present([]) == 0.0
    assert mean_of_present([None, None]) == 0.0


def test_coefficient_of_variation():
    assert coefficient_of_variation([10, 30]) == pytest.approx(0.5)
    assert coefficient_of_variation([7, 7, 7]) == 0.0
    assert coefficient_of_variation([]) == 0.0
    assert coefficient_of_variation([0, 0]) == 0.0


def test_trend_thresholds_are_strict():
    assert classify_trend(6, 5) == "stable"  # exactly 1.2x
    assert classify_trend(4, 5) == "stable"  # exactly 0.8x
    assert classify_trend(7, 5) == "increasing"
    assert classify_trend(3, 5) == "decreasing"
    assert classify_trend(1, 0) == "increasing"
    assert classify_trend(0, 0) == "stable"
