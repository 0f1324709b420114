"""
Rule Mining Module

Predictive Apriori mining of class association rules:
- Itemset lattice (level-wise candidate generation and support counting)
- Bayesian confidence prior and expected predictive accuracy
- Bounded N-best rule set and the adaptive search loop
"""
from .base import (
    ClassRuleMiner,
    UnsupportedAttributeError,
    InvalidClassIndexError,
    validate_dataset,
    resolve_class_index
)
from .itemsets import Itemset, ItemsetLattice
from .prior import PriorModel, expected_accuracy
from .rules import RuleItem, BestRuleSet, RuleExpander, subsumes
from .search import ThresholdState, SearchController, MiningResult, finalize
from .predictive_apriori_miner import PredictiveAprioriMiner

__all__ = [
    'ClassRuleMiner',
    'UnsupportedAttributeError',
    'InvalidClassIndexError',
    'validate_dataset',
    'resolve_class_index',
    'Itemset',
    'ItemsetLattice',
    'PriorModel',
    'expected_accuracy',
    'RuleItem',
    'BestRuleSet',
    'RuleExpander',
    'subsumes',
    'ThresholdState',
    'SearchController',
    'MiningResult',
    'finalize',
    'PredictiveAprioriMiner'
]
