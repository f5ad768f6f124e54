"""Tests for the randomness test battery."""

import numpy as np
import pytest

from prng_battery.engines import LCG
from prng_battery.test_suite import (
    ALL_TESTS,
    CLASSIC_HANDS,
    BatterySettings,
    TestResult,
    calculate_quality_score,
    correlation_test,
    equidistribution_test,
    frequency_test,
    gap_test,
    grade_from_score,
    hand_classes,
    hand_probability,
    poker_test,
    run_all_tests,
    runs_test,
    serial_correlation_bounds,
    serial_test,
)


@pytest.fixture
def lcg_samples():
    return LCG(seed=123456, a=1103515245, c=12345, m=2**31).generate(10_000)


@pytest.mark.parametrize("name", list(ALL_TESTS))
def test_empty_sample_is_neutral(name):
    r = ALL_TESTS[name]([])
    assert r.statistic == 0.0
    assert r.p_value == 1.0
    assert r.passed


@pytest.mark.parametrize("name", list(ALL_TESTS))
def test_input_not_modified(name, lcg_samples):
    samples = lcg_samples[:2000].copy()
    before = samples.copy()
    ALL_TESTS[name](samples)
    assert np.array_equal(samples, before)


class TestFrequency:
    def test_fixed_seed_lcg(self, lcg_samples):
        r = frequency_test(lcg_samples)
        assert r.degrees_of_freedom == 1
        assert 0.0 <= r.p_value <= 1.0
        assert r.zeros + r.ones == 10_000
        assert r.expected == 5000.0

    def test_biased(self):
        r = frequency_test([0.1] * 1000)
        assert r.ones == 0
        assert r.statistic == pytest.approx(1000.0)
        assert r.p_value < 0.001
        assert not r.passed

    def test_threshold_counts_as_one(self):
        assert frequency_test([0.5]).ones == 1


class TestEquidistribution:
    def test_perfectly_flat(self):
        r = equidistribution_test((np.arange(1000) + 0.5) / 1000, bins=10)
        assert r.counts == (100,) * 10
        assert r.statistic == 0.0
        assert r.degrees_of_freedom == 9
        assert r.p_value > 0.99

    def test_one_lands_in_top_bin(self):
        assert equidistribution_test([1.0], bins=10).counts[9] == 1

    def test_bad_bins(self):
        with pytest.raises(ValueError):
            equidistribution_test([0.5], bins=0)


class TestSerial:
    def test_too_short(self):
        r = serial_test([0.5], d=2, bins=10)
        assert r.statistic == 0.0
        assert r.p_value == 1.0
        assert r.degrees_of_freedom == 99

    def test_window_count(self):
        r = serial_test(np.linspace(0, 0.99, 11), d=2, bins=4)
        assert r.windows == 10
        assert r.cells == 16
        assert r.degrees_of_freedom == 15

    def test_alternating_pattern_fails(self):
        r = serial_test([0.05, 0.55] * 500, d=2, bins=2)
        assert r.windows == 999
        assert r.p_value < 1e-6

    def test_lcg_in_range(self, lcg_samples):
        r = serial_test(lcg_samples, d=2, bins=8)
        assert 0.0 <= r.p_value <= 1.0


class TestPoker:
    def test_classic_probabilities(self):
        probs = {label: hand_probability(sig, 5) for sig, label in CLASSIC_HANDS.items()}
        assert probs["five"] == pytest.approx(0.0001)
        assert probs["four"] == pytest.approx(0.0045)
        assert probs["full_house"] == pytest.approx(0.009)
        assert probs["three"] == pytest.approx(0.072)
        assert probs["two_pairs"] == pytest.approx(0.108)
        assert probs["one_pair"] == pytest.approx(0.504)
        assert probs["all_different"] == pytest.approx(0.3024)

    @pytest.mark.parametrize("digits", range(1, 11))
    def test_probabilities_sum_to_one(self, digits):
        total = sum(hand_probability(sig, digits) for sig in hand_classes(digits))
        assert total == pytest.approx(1.0)

    def test_hand_classification(self):
        r = poker_test([0.0, 0.5, 0.25, 0.125])
        assert r.counts["five"] == 1
        assert r.counts["four"] == 1
        assert r.counts["three"] == 1
        assert r.counts["one_pair"] == 1
        assert sum(r.counts.values()) == 4

    def test_empty_keeps_classes(self):
        r = poker_test([])
        assert set(r.counts) == set(CLASSIC_HANDS.values())
        assert r.degrees_of_freedom == 6

    def test_lcg_in_range(self, lcg_samples):
        r = poker_test(lcg_samples)
        assert 0.0 <= r.p_value <= 1.0
        assert sum(r.expected.values()) == pytest.approx(10_000)

    def test_digits_out_of_range(self):
        with pytest.raises(ValueError):
            poker_test([0.5], digits=11)


class TestGap:
    def test_never_hit_is_neutral(self):
        r = gap_test([0.9] * 1000, a=0.1, b=0.8)
        assert r.n_gaps == 0
        assert r.statistic == 0.0
        assert r.p_value == 1.0
        assert r.interval == (0.1, 0.8)
        assert r.p_interval == pytest.approx(0.7)

    def test_empty_interval_is_neutral(self):
        r = gap_test([0.5] * 10, a=0.5, b=0.5)
        assert r.p_value == 1.0
        assert r.n_gaps == 0

    def test_gap_lengths(self):
        r = gap_test([0.25, 0.9, 0.25, 0.9, 0.9, 0.25, 0.9], a=0.2, b=0.3, max_gap_bin=3)
        assert r.n_gaps == 3
        assert r.counts == (1, 1, 1, 0)
        assert r.degrees_of_freedom == 3
        assert sum(r.expected) == pytest.approx(3.0)

    def test_overflow_bin(self):
        samples = [0.9] * 20 + [0.25]
        r = gap_test(samples, a=0.2, b=0.3, max_gap_bin=5)
        assert r.counts[5] == 1

    def test_lcg_in_range(self, lcg_samples):
        r = gap_test(lcg_samples)
        assert 0.0 <= r.p_value <= 1.0
        assert r.n_gaps > 0


class TestCorrelation:
    def test_out_of_domain_lags(self):
        samples = LCG(seed=7).generate(100)
        r = correlation_test(samples, lags=[0, 200])
        for lag in (0, 200):
            assert r.lags[lag].rho == 0.0
            assert r.lags[lag].p_value == 1.0
        assert r.p_value == 1.0

    def test_constant_sample(self):
        r = correlation_test([0.3] * 50, lags=[1])
        assert r.lags[1].rho == 0.0
        assert r.p_value == 1.0

    def test_alternating(self):
        r = correlation_test([0.1, 0.9] * 50, lags=[1, 2])
        assert r.lags[1].rho == pytest.approx(-1.0)
        assert r.lags[2].rho == pytest.approx(1.0)
        assert r.p_value < 1e-6
        assert not r.lag_within_bounds(1)

    def test_small_scale_alternating(self):
        r = correlation_test([1e-8, 5e-8] * 50, lags=[1])
        assert r.lags[1].rho == pytest.approx(-1.0)
        assert r.p_value < 1e-6

    def test_constant_zero_sample(self):
        r = correlation_test([0.0] * 40, lags=[1, 2])
        assert r.lags[1].rho == 0.0
        assert r.p_value == 1.0

    def test_bounds(self):
        low, high = serial_correlation_bounds(100)
        assert low < 1 / 99 < high
        assert serial_correlation_bounds(2) == (-1.0, 1.0)

    def test_lcg_in_range(self, lcg_samples):
        r = correlation_test(lcg_samples)
        assert set(r.lags) == {1, 2, 5, 10}
        assert 0.0 <= r.p_value <= 1.0


class TestRuns:
    def test_alternating_too_many_runs(self):
        r = runs_test([0.1, 0.9] * 50)
        assert r.runs == 100
        assert r.expected_runs == pytest.approx(51.0)
        assert r.statistic > 0
        assert r.p_value < 1e-6

    def test_one_sided_is_neutral(self):
        r = runs_test([0.2] * 30)
        assert r.p_value == 1.0
        assert r.n_below == 30

    def test_single_value(self):
        assert runs_test([0.7]).p_value == 1.0


class TestBattery:
    def test_runs_everything(self, lcg_samples):
        results = run_all_tests(lcg_samples)
        assert [r.name for r in results] == [
            "Frequency", "Equidistribution", "Serial", "Poker", "Gap", "Correlation", "Runs",
        ]
        assert all(0.0 <= r.p_value <= 1.0 for r in results)

    def test_subset_and_alpha(self, lcg_samples):
        settings = BatterySettings(enabled=("runs", "frequency"), alpha=0.05)
        results = run_all_tests(lcg_samples, settings)
        assert [r.name for r in results] == ["Runs", "Frequency"]
        assert all(r.alpha == 0.05 for r in results)

    def test_unknown_test(self):
        with pytest.raises(ValueError, match="Unknown test"):
            run_all_tests([0.5], BatterySettings(enabled=("bogus",)))

    def test_exact_method(self, lcg_samples):
        results = run_all_tests(lcg_samples, BatterySettings(method="exact"))
        assert len(results) == len(ALL_TESTS)


class TestScoring:
    def test_grades(self):
        assert TestResult.grade_from_p(0.5) == "A"
        assert TestResult.grade_from_p(0.05) == "B"
        assert TestResult.grade_from_p(0.005) == "C"
        assert TestResult.grade_from_p(0.0005) == "D"
        assert TestResult.grade_from_p(0.0) == "F"

    def test_score(self):
        results = [
            TestResult(name="a", statistic=1.0, degrees_of_freedom=1, p_value=0.5),
            TestResult(name="b", statistic=99.0, degrees_of_freedom=1, p_value=0.0),
        ]
        assert calculate_quality_score(results) == 50.0
        assert grade_from_score(50.0) == "C"
        assert calculate_quality_score([]) == 0.0

    def test_within(self):
        r = TestResult(name="x", statistic=5.0, degrees_of_freedom=9, p_value=0.8)
        assert r.within((4.0, 15.0))
        assert not r.within((6.0, 15.0))
