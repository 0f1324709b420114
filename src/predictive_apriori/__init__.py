"""
Predictive Apriori: N-best class association rules ranked by expected
predictive accuracy, with no minimum support or confidence to tune.
"""
from .rule_mining import PredictiveAprioriMiner, MiningResult

__version__ = "0.1.0"

__all__ = ['PredictiveAprioriMiner', 'MiningResult']
