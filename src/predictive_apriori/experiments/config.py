from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional, Union


@dataclass
class DataConfig:
    path: str
    name: str
    class_column: Optional[str] = None  # None = last column
    read_options: Dict[str, Any] = field(default_factory=dict)

    def get_class_index(self) -> Union[int, str]:
        return self.class_column if self.class_column is not None else 'last'

    def get_feature_cols(self, df) -> List[str]:
        class_col = self.class_column if self.class_column is not None else df.columns[-1]
        return [c for c in df.columns if c != class_col]


@dataclass
class PreprocessingConfig:
    # Columns are declared nominal with to_nominal; numeric columns are not
    # discretized and make mining fail, so list them here or drop them.
    nominal_columns: Optional[List[str]] = None
    max_values: Optional[int] = None
    drop_columns: List[str] = field(default_factory=list)

    @classmethod
    def default(cls) -> 'PreprocessingConfig':
        return cls(max_values=100)


@dataclass
class PredictiveAprioriConfig:
    num_rules: Optional[int] = 100  # None = all non-subsumed rules
    class_index: Union[int, str] = 'last'
    margin: int = 5
    num_intervals: int = 100
    num_random_rules: int = 1000
    random_state: int = 1
    max_items: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'num_rules': self.num_rules,
            'class_index': self.class_index,
            'margin': self.margin,
            'num_intervals': self.num_intervals,
            'num_random_rules': self.num_random_rules,
            'random_state': self.random_state,
            'max_items': self.max_items
        }


@dataclass
class FilterConfig:
    metric: str
    threshold: float

    def to_dict(self) -> Dict[str, Any]:
        return {'metric': self.metric, 'threshold': self.threshold}


@dataclass
class RuleMiningConfig:
    miner_type: str  # 'predictive_apriori'
    miner_config: Any  # PredictiveAprioriConfig
    mode: str = 'rules'
    filters: List[FilterConfig] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'miner_type': self.miner_type,
            'miner_config': self.miner_config.to_dict(),
            'mode': self.mode,
            'filters': [f.to_dict() for f in self.filters]
        }
