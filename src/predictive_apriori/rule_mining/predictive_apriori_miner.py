"""
Predictive Apriori miner for class association rules.

Finds the N rules with the highest expected predictive accuracy without a
minimum support or confidence threshold.
"""
import logging
import time
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import pandas as pd

from predictive_apriori.rule_mining.base import ClassRuleMiner, resolve_class_index, validate_dataset
from predictive_apriori.rule_mining.itemsets import ItemsetLattice
from predictive_apriori.rule_mining.prior import PriorModel
from predictive_apriori.rule_mining.rules import BestRuleSet
from predictive_apriori.rule_mining.search import MiningResult, SearchController, ThresholdState, finalize

logger = logging.getLogger(__name__)


class PredictiveAprioriMiner(ClassRuleMiner):
    """
    Predictive Apriori class association rule miner.

    Rules are ranked by expected predictive accuracy. The support floor starts
    at one record and rises as the N-best set fills up, so no support or
    confidence threshold has to be chosen up front.
    """

    def __init__(
            self,
            num_rules: int = None,
            class_index: Union[int, str] = 'last',
            margin: int = 5,
            num_intervals: int = 100,
            num_random_rules: int = 1000,
            random_state: int = 1,
            max_items: int = None,
            should_stop: Callable[[], bool] = None,
            **kwargs
    ):
        """
        Initialize Predictive Apriori miner.

        Args:
            num_rules: Number of rules to return (None = all non-subsumed rules)
            class_index: 'first', 'last', 0-based index or column name of the class
            margin: Extra rules kept during the search beyond num_rules
            num_intervals: Confidence bins of the accuracy prior
            num_random_rules: Random rules drawn per premise length for the prior
            random_state: Seed for the prior estimation
            max_items: Maximum number of items in the antecedent (LHS)
            should_stop: Optional callable checked between search levels
        """
        super().__init__(num_rules=num_rules, class_index=class_index, **kwargs)
        if margin < 0:
            raise ValueError(f"margin must be non-negative, got {margin}")
        if max_items is not None and max_items < 1:
            raise ValueError(f"max_items must be a positive integer or None, got {max_items}")
        self.margin = margin
        self.num_intervals = num_intervals
        self.num_random_rules = num_random_rules
        self.random_state = random_state
        self.max_items = max_items
        self.should_stop = should_stop
        self.last_state: Optional[ThresholdState] = None
        self.last_lattice: Optional[ItemsetLattice] = None

    def fit(self, data: pd.DataFrame) -> MiningResult:
        """
        Mine the best class association rules.

        Args:
            data: DataFrame with nominal (category/bool) attributes

        Returns:
            MiningResult with premises, consequences and accuracies, best first
        """
        validate_dataset(data)
        class_index = resolve_class_index(self.class_index, list(data.columns))

        prior = PriorModel(
            num_intervals=self.num_intervals,
            num_random_rules=self.num_random_rules,
            random_state=self.random_state
        )
        prior.estimate(data, class_index)

        lattice = ItemsetLattice(data, class_index)
        best = BestRuleSet(num_rules=self.num_rules, margin=self.margin)
        state = ThresholdState()

        logger.info("Mining %s rules for class '%s' from %d records, %d attributes",
                    self.num_rules or 'all', data.columns[class_index], len(data), data.shape[1])

        controller = SearchController(lattice, prior, best, max_items=self.max_items,
                                      should_stop=self.should_stop)
        controller.run(state)
        result = finalize(best, self.num_rules)

        logger.info("Found %d rules; final support floor %d", len(result), state.premise_count)
        self.last_state = state
        self.last_lattice = lattice
        return result

    def _format_item(self, lattice: ItemsetLattice, item) -> Dict[str, Any]:
        feature, value = lattice.describe(item)
        return {'feature': feature, 'value': value}

    def to_rules(self, result: MiningResult, lattice: ItemsetLattice) -> List[Dict[str, Any]]:
        """Convert a MiningResult into the platform's rule dicts."""
        num_records = lattice.num_records
        rules = []
        for rule in result.rules():
            antecedents = [
                self._format_item(lattice, item)
                for item in sorted(rule.premise, key=lambda item: item[0])
            ]
            rules.append({
                'antecedents': antecedents,
                'consequent': self._format_item(lattice, rule.consequence),
                'accuracy': rule.accuracy,
                'support': rule.support / num_records if num_records else 0.0,
                'confidence': rule.confidence,
                'support_count': rule.support,
                'premise_count': rule.premise_support
            })
        return rules

    def mine_rules(self, data: pd.DataFrame) -> Tuple[List[Dict[str, Any]], Dict[str, Any]]:
        """
        Mine class association rules with Predictive Apriori.

        Args:
            data: DataFrame with nominal features and the class attribute

        Returns:
            Tuple of (rules, stats)
        """
        start_time = time.time()

        result = self.fit(data)
        rules = self.to_rules(result, self.last_lattice)

        execution_time = time.time() - start_time

        stats = {
            'num_rules': len(rules),
            'execution_time': execution_time,
            'average_accuracy': sum(r['accuracy'] for r in rules) / len(rules) if rules else 0.0,
            'average_support': sum(r['support'] for r in rules) / len(rules) if rules else 0.0,
            'average_confidence': sum(r['confidence'] for r in rules) / len(rules) if rules else 0.0,
            'final_premise_count': self.last_state.premise_count,
            'levels_searched': self.last_state.levels_searched,
            'algorithm': 'PredictiveApriori',
            'mode': 'rules'
        }

        return rules, stats

    def __repr__(self):
        return (f"PredictiveAprioriMiner(num_rules={self.num_rules}, class_index={self.class_index!r}, "
                f"margin={self.margin}, max_items={self.max_items})")
