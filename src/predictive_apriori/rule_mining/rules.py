"""
Candidate class association rules and the bounded N-best rule collection.
"""
import logging
from bisect import bisect_left, bisect_right
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterator, List, Optional

from predictive_apriori.rule_mining.itemsets import Item, Itemset

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuleItem:
    """
    A class association rule premise ==> consequence.

    Attributes:
        premise: Non-class (attribute, value) items
        consequence: The single class item
        accuracy: Expected predictive accuracy
        support: Records matching premise and consequence
        premise_support: Records matching the premise
        generation: Creation order; breaks accuracy ties in favour of older rules
    """
    premise: FrozenSet[Item]
    consequence: Item
    accuracy: float
    support: int
    premise_support: int
    generation: int = 0

    @property
    def rank_key(self):
        return -self.accuracy, self.generation

    @property
    def confidence(self) -> float:
        return self.support / self.premise_support if self.premise_support else 0.0


def subsumes(general: RuleItem, specific: RuleItem) -> bool:
    """True when ``general`` makes ``specific`` redundant: same consequence,
    premise subset and accuracy at least as high."""
    return (
        general.consequence == specific.consequence
        and general.premise <= specific.premise
        and general.accuracy >= specific.accuracy
    )


class BestRuleSet:
    """
    Ranked, size-bounded collection of non-subsumed rules.

    The working capacity is ``num_rules + margin``; the finalizer trims the
    margin off. ``num_rules=None`` leaves the collection uncapped.
    """

    def __init__(self, num_rules: Optional[int] = None, margin: int = 5):
        if num_rules is not None and num_rules < 1:
            raise ValueError(f"num_rules must be a positive integer or None, got {num_rules}")
        if margin < 0:
            raise ValueError(f"margin must be non-negative, got {margin}")
        self.num_rules = num_rules
        self.margin = margin
        self.capacity = None if num_rules is None else num_rules + margin
        # best first, with the rank keys kept alongside for bisection
        self._rules: List[RuleItem] = []
        self._keys: List[tuple] = []
        self._by_consequence: Dict[Item, List[RuleItem]] = {}
        self._changed = False

    def __len__(self):
        return len(self._rules)

    def __iter__(self) -> Iterator[RuleItem]:
        return iter(list(self._rules))

    def descending(self) -> List[RuleItem]:
        return list(self._rules)

    def ascending(self) -> List[RuleItem]:
        return self._rules[::-1]

    def peek_best(self) -> Optional[RuleItem]:
        return self._rules[0] if self._rules else None

    def peek_worst(self) -> Optional[RuleItem]:
        return self._rules[-1] if self._rules else None

    @property
    def is_full(self) -> bool:
        return self.capacity is not None and len(self._rules) >= self.capacity

    @property
    def worst_acceptable(self) -> float:
        """Accuracy a candidate must reach to enter; zero until the set is full."""
        return self._rules[-1].accuracy if self.is_full else 0.0

    def was_changed(self) -> bool:
        """Whether the last insertion attempt moved ``worst_acceptable``."""
        return self._changed

    def _add(self, rule: RuleItem):
        pos = bisect_right(self._keys, rule.rank_key)
        self._rules.insert(pos, rule)
        self._keys.insert(pos, rule.rank_key)
        self._by_consequence.setdefault(rule.consequence, []).append(rule)

    def _remove_at(self, pos: int) -> RuleItem:
        rule = self._rules.pop(pos)
        self._keys.pop(pos)
        self._by_consequence[rule.consequence].remove(rule)
        return rule

    def _remove(self, rule: RuleItem):
        pos = bisect_left(self._keys, rule.rank_key)
        while self._rules[pos] is not rule:
            pos += 1
        self._remove_at(pos)

    def try_insert(self, candidate: RuleItem) -> bool:
        """
        Offer a candidate rule.

        When the set is full, a candidate tying the worst accuracy ranks
        below it and is evicted again straight away.

        Returns:
            True if the candidate is retained after insertion and eviction
        """
        before = self.worst_acceptable
        self._changed = False

        if self.is_full and candidate.accuracy < self._rules[-1].accuracy:
            return False

        related = self._by_consequence.get(candidate.consequence, [])
        if any(subsumes(rule, candidate) for rule in related):
            return False

        for rule in [r for r in related if subsumes(candidate, r)]:
            self._remove(rule)
        self._add(candidate)

        admitted = True
        while self.capacity is not None and len(self._rules) > self.capacity:
            if self._remove_at(len(self._rules) - 1) is candidate:
                admitted = False

        self._changed = self.worst_acceptable != before
        return admitted

    def pop_best(self) -> RuleItem:
        if not self._rules:
            raise IndexError("pop from an empty BestRuleSet")
        return self._remove_at(0)

    def __repr__(self):
        return f"BestRuleSet(num_rules={self.num_rules}, margin={self.margin}, size={len(self)})"


class RuleExpander:
    """
    Turns class itemsets into scored candidate rules.

    Args:
        prior: Object exposing ``expected_accuracy(support_count, premise_count)``
        class_index: Position of the class attribute
    """

    def __init__(self, prior, class_index: int):
        self.prior = prior
        self.class_index = class_index

    def expand(self, itemset: Itemset, state) -> Optional[RuleItem]:
        """Build the rule of one itemset, or None if it holds no class item.

        Each rule takes the next value of ``state.count`` as its generation.
        """
        class_item = itemset.class_item(self.class_index)
        if class_item is None:
            return None

        accuracy = self.prior.expected_accuracy(itemset.support, itemset.premise_support)
        state.count += 1
        return RuleItem(
            premise=frozenset(itemset.premise_items(self.class_index)),
            consequence=class_item,
            accuracy=accuracy,
            support=itemset.support,
            premise_support=itemset.premise_support,
            generation=state.count
        )

    def feed(self, itemsets: List[Itemset], state, best: BestRuleSet) -> bool:
        """Expand every itemset into ``best``; True if the worst-acceptable accuracy moved."""
        changed = False
        for itemset in itemsets:
            rule = self.expand(itemset, state)
            if rule is None:
                continue
            best.try_insert(rule)
            changed = best.was_changed() or changed
        return changed
