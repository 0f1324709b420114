"""
Bayesian prior over rule confidence and the expected predictive accuracy.

The prior is estimated by drawing random class rules of every premise length,
histogramming their confidence, and weighting each length by how many rules of
that length exist. The expected accuracy of a rule seen with ``support``
successes among ``premise`` matching records is the posterior mean of its
confidence under that prior.
"""
import logging
from typing import Tuple

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


def expected_accuracy(
    support_count: int,
    premise_count: int,
    midpoints: np.ndarray,
    priors: np.ndarray
) -> float:
    """
    Posterior mean of the confidence of a rule.

    Args:
        support_count: Records matching premise and consequence
        premise_count: Records matching the premise
        midpoints: Confidence bin midpoints, strictly inside (0, 1)
        priors: Prior probability of each bin

    Returns:
        Expected predictive accuracy in [0, 1]
    """
    midpoints = np.asarray(midpoints, dtype=float)
    priors = np.asarray(priors, dtype=float)
    positive = priors > 0
    if not positive.any():
        raise ValueError("Prior table has no positive entries")

    confidence = midpoints[positive]
    failures = premise_count - support_count
    log_weights = (
        np.log(priors[positive])
        + support_count * np.log(confidence)
        + failures * np.log1p(-confidence)
    )
    weights = np.exp(log_weights - log_weights.max())
    return float(np.dot(weights, confidence) / weights.sum())


def log_premise_counts(domain_sizes) -> np.ndarray:
    """
    Log of the number of distinct premises of each length.

    Entry L is the log of the sum, over all L-subsets of attributes, of the
    product of their domain sizes (the elementary symmetric sum), built with
    the usual one-attribute-at-a-time recurrence.
    """
    num_attributes = len(domain_sizes)
    log_counts = np.full(num_attributes + 1, -np.inf)
    log_counts[0] = 0.0
    for size in domain_sizes:
        log_size = np.log(size)
        for length in range(num_attributes, 0, -1):
            log_counts[length] = np.logaddexp(log_counts[length], log_counts[length - 1] + log_size)
    return log_counts


class PriorModel:
    """
    Confidence prior estimated from random class rules.

    Args:
        num_intervals: Number of confidence bins
        num_random_rules: Random rules drawn per premise length
        random_state: Seed of the rule sampler
    """

    def __init__(self, num_intervals: int = 100, num_random_rules: int = 1000, random_state: int = 1):
        if num_intervals < 1:
            raise ValueError(f"num_intervals must be positive, got {num_intervals}")
        if num_random_rules < 1:
            raise ValueError(f"num_random_rules must be positive, got {num_random_rules}")
        self.num_intervals = num_intervals
        self.num_random_rules = num_random_rules
        self.random_state = random_state
        self.priors = None
        self.midpoints = None

    @staticmethod
    def _codes(series: pd.Series) -> Tuple[np.ndarray, int]:
        if isinstance(series.dtype, pd.CategoricalDtype):
            return series.cat.codes.to_numpy(dtype=np.int64), len(series.cat.categories)
        # missing bool values get code -1, like missing categories
        codes = pd.Categorical(series, categories=[False, True]).codes
        return codes.astype(np.int64), 2

    def estimate(self, data: pd.DataFrame, class_index: int) -> Tuple[np.ndarray, np.ndarray]:
        """
        Estimate the prior table for a nominal dataset.

        Returns:
            Tuple of (priors, midpoints), both of length num_intervals
        """
        k = self.num_intervals
        midpoints = (np.arange(k) + 0.5) / k

        encoded = [self._codes(data[col]) for col in data.columns]
        codes = np.column_stack([c for c, _ in encoded]) if encoded else np.empty((len(data), 0))
        domain_sizes = [size for _, size in encoded]

        attributes = [a for a in range(len(encoded)) if a != class_index and domain_sizes[a] > 0]
        num_classes = domain_sizes[class_index] if encoded else 0
        num_attributes = len(attributes)

        histograms = np.zeros((num_attributes + 1, k))
        sampled = np.zeros(num_attributes + 1)

        if num_attributes and num_classes and len(data):
            rng = np.random.default_rng(self.random_state)
            class_codes = codes[:, class_index]
            for length in range(1, num_attributes + 1):
                for _ in range(self.num_random_rules):
                    chosen = rng.choice(attributes, size=length, replace=False)
                    values = np.array([rng.integers(domain_sizes[a]) for a in chosen])
                    class_value = rng.integers(num_classes)

                    mask = np.all(codes[:, chosen] == values, axis=1)
                    premise = int(mask.sum())
                    if premise == 0:
                        continue
                    confidence = (mask & (class_codes == class_value)).sum() / premise
                    histograms[length, min(int(confidence * k), k - 1)] += 1
                    sampled[length] += 1

        log_counts = log_premise_counts([domain_sizes[a] for a in attributes])
        if num_classes:
            log_counts = log_counts + np.log(num_classes)

        usable = sampled > 0
        if usable.any():
            log_w = log_counts[usable]
            weights = np.exp(log_w - log_w.max())
            priors = (histograms[usable] / sampled[usable, None] * weights[:, None]).sum(axis=0)
            priors /= priors.sum()
        else:
            logger.warning("No random rule matched any record; using a uniform prior")
            priors = np.full(k, 1.0 / k)

        logger.debug("Estimated prior over %d intervals from %d random rules", k, int(sampled.sum()))
        self.priors = priors
        self.midpoints = midpoints
        return priors, midpoints

    def expected_accuracy(self, support_count: int, premise_count: int) -> float:
        if self.priors is None:
            raise RuntimeError("PriorModel must be estimated before computing accuracies")
        return expected_accuracy(support_count, premise_count, self.midpoints, self.priors)

    def __repr__(self):
        return (f"PriorModel(num_intervals={self.num_intervals}, "
                f"num_random_rules={self.num_random_rules}, random_state={self.random_state})")
