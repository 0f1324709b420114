import numpy as np
import pandas as pd
import pytest

from predictive_apriori.rule_mining.itemsets import Itemset, ItemsetLattice


def nominal(df: pd.DataFrame) -> pd.DataFrame:
    return df.astype('category')


@pytest.fixture
def a_implies_c():
    """C=1 whenever A=1 (6/6); B splits the class 4/5 either way."""
    rows = [
        # A, B, C
        (1, 1, 1),
        (1, 0, 1),
        (1, 1, 1),
        (1, 0, 1),
        (1, 1, 1),
        (1, 0, 1),
        (0, 1, 0),
        (0, 0, 0),
        (0, 0, 1),
        (0, 1, 1),
    ]
    return nominal(pd.DataFrame(rows, columns=['A', 'B', 'C']))


@pytest.fixture
def weather():
    """Small four-attribute play/no-play table."""
    rows = [
        ('sunny', 'hot', 'high', 'false', 'no'),
        ('sunny', 'hot', 'high', 'true', 'no'),
        ('overcast', 'hot', 'high', 'false', 'yes'),
        ('rainy', 'mild', 'high', 'false', 'yes'),
        ('rainy', 'cool', 'normal', 'false', 'yes'),
        ('rainy', 'cool', 'normal', 'true', 'no'),
        ('overcast', 'cool', 'normal', 'true', 'yes'),
        ('sunny', 'mild', 'high', 'false', 'no'),
        ('sunny', 'cool', 'normal', 'false', 'yes'),
        ('rainy', 'mild', 'normal', 'false', 'yes'),
        ('sunny', 'mild', 'normal', 'true', 'yes'),
        ('overcast', 'mild', 'high', 'true', 'yes'),
        ('overcast', 'hot', 'normal', 'false', 'yes'),
        ('rainy', 'mild', 'high', 'true', 'no'),
    ]
    return nominal(pd.DataFrame(rows, columns=['outlook', 'temperature', 'humidity', 'windy', 'play']))


@pytest.fixture
def random_nominal():
    """60 records, four 3-valued attributes and a class correlated with x0."""
    rng = np.random.default_rng(0)
    x = rng.integers(0, 3, size=(60, 4))
    noise = rng.random(60) < 0.2
    y = np.where(noise, 1 - (x[:, 0] == 0), (x[:, 0] == 0)).astype(int)
    df = pd.DataFrame(x, columns=['x0', 'x1', 'x2', 'x3'])
    df['y'] = y
    return nominal(df.astype(str))


class LaplacePrior:
    """Stand-in prior: the Laplace estimate (x + 1) / (n + 2)."""

    def expected_accuracy(self, support_count, premise_count):
        return (support_count + 1) / (premise_count + 2)


class FakeLattice:
    """Serves preset itemsets per level and records what the search asked for."""

    def __init__(self, levels, num_records, class_index=2, num_levels=None):
        self.levels = levels
        self.num_records = num_records
        self.class_index = class_index
        self.num_levels = num_levels if num_levels is not None else len(levels)
        self.merge_calls = []

    def singletons(self):
        return list(self.levels[1])

    def count(self, itemsets):
        pass

    filter_by_support = staticmethod(ItemsetLattice.filter_by_support)

    def merge_level(self, itemsets, k):
        self.merge_calls.append((k, list(itemsets)))
        return list(self.levels.get(k, []))

    def build_index(self, itemsets):
        return {itemset.key for itemset in itemsets}

    def prune_by_index(self, candidates, index):
        return candidates


def class_itemset(premise, class_value, support, premise_support, class_index=2):
    items = tuple(sorted(list(premise) + [(class_index, class_value)], key=lambda item: item[0]))
    return Itemset(items, support=support, premise_support=premise_support)


@pytest.fixture
def laplace_prior():
    return LaplacePrior()
