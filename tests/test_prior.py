import numpy as np
import pandas as pd
import pytest

from predictive_apriori.rule_mining.prior import PriorModel, expected_accuracy, log_premise_counts


def test_log_premise_counts_are_elementary_symmetric_sums():
    counts = np.exp(log_premise_counts([2, 3, 4]))
    assert counts == pytest.approx([1, 9, 26, 24])


def test_uniform_prior_gives_laplace_estimate():
    k = 1000
    midpoints = (np.arange(k) + 0.5) / k
    priors = np.full(k, 1.0 / k)

    assert expected_accuracy(3, 4, midpoints, priors) == pytest.approx(4 / 6, abs=1e-3)
    assert expected_accuracy(0, 0, midpoints, priors) == pytest.approx(0.5, abs=1e-3)


def test_expected_accuracy_ignores_zero_prior_bins():
    midpoints = np.array([0.25, 0.75])
    assert expected_accuracy(5, 10, midpoints, np.array([0.0, 1.0])) == pytest.approx(0.75)


def test_expected_accuracy_rejects_empty_prior():
    with pytest.raises(ValueError):
        expected_accuracy(1, 1, np.array([0.5]), np.array([0.0]))


def test_estimate_produces_normalized_table(weather):
    model = PriorModel(num_intervals=20, num_random_rules=200, random_state=3)
    priors, midpoints = model.estimate(weather, class_index=4)

    assert len(priors) == len(midpoints) == 20
    assert priors.sum() == pytest.approx(1.0)
    assert (priors >= 0).all()
    assert midpoints.min() > 0 and midpoints.max() < 1


def test_estimate_is_deterministic_for_a_seed(weather):
    first, _ = PriorModel(num_intervals=20, num_random_rules=100, random_state=7).estimate(weather, 4)
    second, _ = PriorModel(num_intervals=20, num_random_rules=100, random_state=7).estimate(weather, 4)
    np.testing.assert_array_equal(first, second)


def test_accuracy_grows_with_perfect_evidence(weather):
    model = PriorModel(num_intervals=50, num_random_rules=200)
    model.estimate(weather, class_index=4)

    best_case = [model.expected_accuracy(n, n) for n in range(1, 12)]
    assert all(a < b for a, b in zip(best_case, best_case[1:]))
    assert model.expected_accuracy(5, 5) > model.expected_accuracy(4, 5)
    assert 0.0 <= model.expected_accuracy(0, 14) <= 1.0


def test_uniform_fallback_without_non_class_attributes(weather):
    model = PriorModel(num_intervals=10)
    priors, _ = model.estimate(weather[['play']], class_index=0)
    np.testing.assert_allclose(priors, np.full(10, 0.1))


def test_expected_accuracy_requires_estimate():
    with pytest.raises(RuntimeError):
        PriorModel().expected_accuracy(1, 1)


@pytest.mark.parametrize("kwargs", [{'num_intervals': 0}, {'num_random_rules': 0}])
def test_invalid_parameters(kwargs):
    with pytest.raises(ValueError):
        PriorModel(**kwargs)


def test_missing_bool_values_never_match():
    codes, size = PriorModel._codes(pd.Series(pd.array([True, None, False], dtype='boolean')))
    assert size == 2
    assert list(codes) == [1, -1, 0]
