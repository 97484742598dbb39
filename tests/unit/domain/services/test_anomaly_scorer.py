from __future__ import annotations

import pytest

from farecast.domain.services.anomaly_scorer import (
    MAD_SCALE,
    rarity,
    robust_std,
    score,
)


def test_robust_std_scales_median_absolute_deviation() -> None:
    # median 3, absolute deviations [2, 1, 0, 1, 2] -> MAD 1
    assert robust_std([1, 2, 3, 4, 5]) == pytest.approx(MAD_SCALE)


def test_robust_std_uses_upper_median_for_even_samples() -> None:
    # sorted [1, 2, 4, 10]: median 4, deviations [0, 2, 3, 6] -> upper middle 3
    assert robust_std([10, 1, 4, 2]) == pytest.approx(3 * MAD_SCALE)


def test_robust_std_of_empty_sample_is_zero() -> None:
    assert robust_std([]) == 0.0


def test_score_computes_delta_and_z() -> None:
    result = score(90.0, 100.0, [1, 2, 3, 4, 5])

    assert result.delta_pct == pytest.approx(0.1)
    assert result.z_score == pytest.approx(-10 / MAD_SCALE)
    assert result.is_anomaly is True


def test_zero_spread_gives_zero_z() -> None:
    result = score(80.0, 100.0, [0.0, 0.0, 0.0, 0.0])

    assert result.z_score == 0.0
    assert result.is_anomaly is False
    assert result.delta_pct == pytest.approx(0.2)


def test_zero_expected_gives_zero_delta() -> None:
    assert score(10.0, 0.0, [1, 2, 3]).delta_pct == 0.0


@pytest.mark.parametrize(
    "actual, anomaly",
    [
        (100.0 + 1.99 * MAD_SCALE, False),
        (100.0 + 2.01 * MAD_SCALE, True),
        (100.0 - 2.01 * MAD_SCALE, True),
        (100.0 - 1.5 * MAD_SCALE, False),
    ],
)
def test_anomaly_flag_requires_z_beyond_two(actual: float, anomaly: bool) -> None:
    result = score(actual, 100.0, [1, 2, 3, 4, 5])

    assert result.is_anomaly is anomaly
    assert result.is_anomaly == (abs(result.z_score) > 2)


def test_rarity_counts_prices_at_or_below() -> None:
    history = [100, 120, 140, 160]

    assert rarity(99, history) == 0.0
    assert rarity(100, history) == 0.25
    assert rarity(130, history) == 0.5
    assert rarity(160, history) == 1.0


def test_rarity_is_monotone_in_price() -> None:
    history = [310, 250, 280, 305, 260, 290, 275]
    values = [rarity(price, history) for price in range(240, 330, 5)]

    assert values == sorted(values)
    assert all(0.0 <= value <= 1.0 for value in values)


def test_rarity_of_empty_history_is_neutral() -> None:
    assert rarity(100.0, []) == 0.5
