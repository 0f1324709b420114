"""
Adaptive level-wise search for the N best class association rules.

The search walks premise levels k = 1, 2, ... and, whenever the N-best set
moves, raises the support floor while even a perfect rule at that support
could not beat the worst retained rule.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from predictive_apriori.rule_mining.itemsets import Itemset
from predictive_apriori.rule_mining.rules import BestRuleSet, RuleExpander, RuleItem

logger = logging.getLogger(__name__)


@dataclass
class ThresholdState:
    """
    Mutable context of one mining run.

    Attributes:
        premise_count: Minimum support an itemset needs to be considered
        expectation: Worst-acceptable accuracy of the N-best set
        count: Running generation counter handed to each new rule
        history: Every support floor taken, in order
        levels_searched: Number of levels whose itemsets were generated
    """
    premise_count: int = 1
    expectation: float = 0.0
    count: int = 0
    history: List[int] = field(default_factory=lambda: [1])
    levels_searched: int = 0


@dataclass
class MiningResult:
    """Index-aligned rule sequences, best rule first."""
    premises: List[Any] = field(default_factory=list)
    consequences: List[Any] = field(default_factory=list)
    accuracies: List[float] = field(default_factory=list)
    supports: List[int] = field(default_factory=list)
    premise_supports: List[int] = field(default_factory=list)

    def __len__(self):
        return len(self.accuracies)

    def rules(self) -> List[RuleItem]:
        return [
            RuleItem(premise, consequence, accuracy, support, premise_support, generation=i)
            for i, (premise, consequence, accuracy, support, premise_support) in enumerate(zip(
                self.premises, self.consequences, self.accuracies, self.supports, self.premise_supports
            ))
        ]


def finalize(best: BestRuleSet, num_rules: Optional[int] = None) -> MiningResult:
    """
    Drain the best set into the final result.

    Rules are taken best first until the set is empty or ``num_rules`` rules
    were taken, which drops the working margin.
    """
    result = MiningResult()
    while len(best) > 0 and (num_rules is None or len(result) < num_rules):
        rule = best.pop_best()
        result.premises.append(rule.premise)
        result.consequences.append(rule.consequence)
        result.accuracies.append(rule.accuracy)
        result.supports.append(rule.support)
        result.premise_supports.append(rule.premise_support)
    return result


class SearchController:
    """
    Drives the level loop of one mining run.

    Args:
        lattice: ItemsetLattice-like strategy producing and counting itemsets
        prior: Object exposing ``expected_accuracy(support_count, premise_count)``
        best: The N-best rule collection to fill
        max_items: Maximum number of premise items (None = all attributes)
        should_stop: Optional callable checked between levels
    """

    def __init__(
        self,
        lattice,
        prior,
        best: BestRuleSet,
        max_items: Optional[int] = None,
        should_stop: Optional[Callable[[], bool]] = None
    ):
        self.lattice = lattice
        self.prior = prior
        self.best = best
        self.max_items = max_items
        self.should_stop = should_stop
        self.expander = RuleExpander(prior, lattice.class_index)

    def generate_itemsets(self, level: int, held: List[Itemset], state: ThresholdState) -> List[Itemset]:
        if level == 1:
            candidates = self.lattice.singletons()
        else:
            if not held:
                return []
            candidates = self.lattice.merge_level(held, level)
            index = self.lattice.build_index(held)
            candidates = self.lattice.prune_by_index(candidates, index)

        self.lattice.count(candidates)
        return self.lattice.filter_by_support(candidates, state.premise_count)

    def escalate_threshold(self, state: ThresholdState) -> bool:
        """
        Raise the support floor past every count whose best possible rule
        cannot beat the current expectation.

        Returns:
            False when the floor exceeds the number of records
        """
        num_records = self.lattice.num_records
        start = state.premise_count
        while self.prior.expected_accuracy(state.premise_count, state.premise_count) <= state.expectation:
            state.premise_count += 1
            if state.premise_count > num_records:
                break
        if state.premise_count != start:
            state.history.append(state.premise_count)
            logger.info("Support floor raised from %d to %d (expectation %.5f)",
                        start, state.premise_count, state.expectation)
        return state.premise_count <= num_records

    def run(self, state: ThresholdState) -> BestRuleSet:
        num_levels = self.lattice.num_levels
        if self.max_items is not None:
            num_levels = min(num_levels, self.max_items)

        held: List[Itemset] = []
        for level in range(1, num_levels + 1):
            if self.should_stop is not None and self.should_stop():
                logger.info("Search stopped before level %d", level)
                break

            itemsets = self.generate_itemsets(level, held, state)
            if itemsets:
                state.levels_searched = level
            logger.debug("Level %d: %d itemsets with support >= %d",
                         level, len(itemsets), state.premise_count)

            changed = self.expander.feed(itemsets, state, self.best)
            held = itemsets
            if not changed:
                continue

            state.expectation = self.best.worst_acceptable
            if not self.escalate_threshold(state):
                logger.info("Support floor exceeds %d records; search complete at level %d",
                            self.lattice.num_records, level)
                break
            held = self.lattice.filter_by_support(held, state.premise_count)

        return self.best
