"""
Level-wise itemset lattice over nominal data.

Itemsets are assignments of values to distinct attributes. Every itemset
produced here contains the class attribute exactly once, so that an itemset
of level k carries k premise items plus one class item and maps onto exactly
one class association rule.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

import numpy as np
import pandas as pd
from mlxtend.preprocessing import TransactionEncoder

logger = logging.getLogger(__name__)

# (attribute position, value)
Item = Tuple[int, Any]


def _sorted_items(items: Iterable[Item]) -> Tuple[Item, ...]:
    return tuple(sorted(items, key=lambda item: item[0]))


@dataclass
class Itemset:
    """
    Attribute-value assignment with its support counts.

    Attributes:
        items: (attribute, value) pairs sorted by attribute position
        support: number of records matching every item
        premise_support: number of records matching the non-class items
    """
    items: Tuple[Item, ...]
    support: int = 0
    premise_support: int = 0

    @property
    def key(self) -> Tuple[Item, ...]:
        return self.items

    def __len__(self):
        return len(self.items)

    def class_item(self, class_index: int) -> Optional[Item]:
        for item in self.items:
            if item[0] == class_index:
                return item
        return None

    def premise_items(self, class_index: int) -> Tuple[Item, ...]:
        return tuple(item for item in self.items if item[0] != class_index)


class ItemsetLattice:
    """
    Builds class itemsets level by level for one dataset.

    Records are one-hot encoded once with mlxtend's TransactionEncoder; support
    counting is then a boolean AND over the encoded item columns.
    """

    def __init__(self, data: pd.DataFrame, class_index: int):
        self.columns = list(data.columns)
        self.class_index = class_index
        self.num_records = len(data)
        self.domains = [self._domain(data[col]) for col in self.columns]
        self._item_columns = self._encode(data)

    @staticmethod
    def _domain(series: pd.Series) -> List[Any]:
        if isinstance(series.dtype, pd.CategoricalDtype):
            return list(series.cat.categories)
        return [False, True]

    def _encode(self, data: pd.DataFrame) -> Dict[Item, np.ndarray]:
        """
        One-hot encode records into one boolean column per (attribute, value).

        Missing values are skipped, so they never match an item.
        """
        tokens = {}
        transactions = []
        for row in data.itertuples(index=False, name=None):
            transaction = []
            for attribute, value in enumerate(row):
                if pd.notna(value):
                    token = f"{attribute}__{value}"
                    tokens[token] = (attribute, value)
                    transaction.append(token)
            transactions.append(transaction)

        if not tokens:
            return {}

        te = TransactionEncoder()
        te_array = te.fit(transactions).transform(transactions)
        return {tokens[token]: te_array[:, i] for i, token in enumerate(te.columns_)}

    @property
    def num_levels(self) -> int:
        """Number of premise levels: one per non-class attribute."""
        return max(len(self.columns) - 1, 0)

    def describe(self, item: Item) -> Tuple[str, Any]:
        attribute, value = item
        return self.columns[attribute], value

    def singletons(self) -> List[Itemset]:
        """All (attribute value, class value) pairs, in attribute then category order."""
        class_values = self.domains[self.class_index]
        itemsets = []
        for attribute, domain in enumerate(self.domains):
            if attribute == self.class_index:
                continue
            for value in domain:
                for class_value in class_values:
                    itemsets.append(Itemset(_sorted_items([
                        (attribute, value), (self.class_index, class_value)
                    ])))
        return itemsets

    def _mask(self, items: Iterable[Item]) -> np.ndarray:
        mask = np.ones(self.num_records, dtype=bool)
        for item in items:
            column = self._item_columns.get(item)
            if column is None:
                return np.zeros(self.num_records, dtype=bool)
            mask &= column
        return mask

    def count(self, itemsets: List[Itemset]) -> None:
        """Set support and premise support of every itemset in place."""
        for itemset in itemsets:
            premise_mask = self._mask(itemset.premise_items(self.class_index))
            class_item = itemset.class_item(self.class_index)
            itemset.premise_support = int(premise_mask.sum())
            if class_item is None:
                itemset.support = itemset.premise_support
            else:
                itemset.support = int((premise_mask & self._mask([class_item])).sum())

    @staticmethod
    def filter_by_support(itemsets: List[Itemset], min_support: int) -> List[Itemset]:
        return [itemset for itemset in itemsets if itemset.support >= min_support]

    def merge_level(self, itemsets: List[Itemset], k: int) -> List[Itemset]:
        """
        Join level k-1 itemsets into level k candidates.

        Two itemsets are joined when they share the class value and their
        first k-2 premise items, and their last premise items belong to
        different attributes.
        """
        groups: Dict[Tuple, List[Item]] = {}
        for itemset in itemsets:
            premise = itemset.premise_items(self.class_index)
            if len(premise) != k - 1:
                continue
            group_key = (itemset.class_item(self.class_index), premise[:-1])
            groups.setdefault(group_key, []).append(premise[-1])

        candidates = []
        for (class_item, prefix), tails in groups.items():
            for i, first in enumerate(tails):
                for second in tails[i + 1:]:
                    if first[0] == second[0]:
                        continue
                    candidates.append(Itemset(_sorted_items(prefix + (first, second, class_item))))

        logger.debug("Level %d: %d candidates from %d itemsets", k, len(candidates), len(itemsets))
        return candidates

    @staticmethod
    def build_index(itemsets: List[Itemset]) -> Set[Tuple[Item, ...]]:
        return {itemset.key for itemset in itemsets}

    def prune_by_index(self, candidates: List[Itemset], index: Set[Tuple[Item, ...]]) -> List[Itemset]:
        """Drop candidates that have a premise subset one item smaller missing from the index."""
        kept = []
        for candidate in candidates:
            premise = candidate.premise_items(self.class_index)
            class_item = candidate.class_item(self.class_index)
            if len(premise) < 2:
                kept.append(candidate)
                continue
            closed = True
            for i in range(len(premise)):
                subset = premise[:i] + premise[i + 1:]
                if class_item is not None:
                    subset = _sorted_items(subset + (class_item,))
                if subset not in index:
                    closed = False
                    break
            if closed:
                kept.append(candidate)
        return kept
