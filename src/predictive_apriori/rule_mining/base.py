"""
Base interfaces for class association rule miners.
"""
from abc import ABC, abstractmethod
from typing import Dict, List, Tuple, Any, Union
import pandas as pd
from pandas.api import types as ptypes


class UnsupportedAttributeError(ValueError):
    """Raised when a dataset holds an attribute that is not nominal."""


class InvalidClassIndexError(ValueError):
    """Raised when the class attribute cannot be resolved."""


CLASS_INDEX_ALIASES = ('first', 'last')


def validate_dataset(data: pd.DataFrame) -> None:
    """
    Check that every attribute of the dataset is nominal.

    Nominal attributes are ``category`` or ``bool`` columns. Numeric,
    datetime and free-text columns are rejected before any mining starts;
    use ``preprocessing.to_nominal`` to declare string columns as nominal.

    Raises:
        UnsupportedAttributeError: on the first offending column
    """
    for col in data.columns:
        dtype = data[col].dtype
        if isinstance(dtype, pd.CategoricalDtype) or ptypes.is_bool_dtype(dtype):
            continue
        if ptypes.is_numeric_dtype(dtype):
            kind = 'numeric'
        elif ptypes.is_datetime64_any_dtype(dtype) or ptypes.is_timedelta64_dtype(dtype):
            kind = 'date'
        elif ptypes.is_string_dtype(dtype) or ptypes.is_object_dtype(dtype):
            kind = 'string'
        else:
            kind = str(dtype)
        raise UnsupportedAttributeError(
            f"Attribute '{col}' is {kind}; only nominal (category/bool) attributes are supported"
        )


def resolve_class_index(class_index: Union[int, str], columns: List[Any]) -> int:
    """
    Resolve a class index option to a 0-based attribute position.

    Accepts 'first', 'last', a 0-based integer (or digit string) or a
    column name.
    """
    num_attributes = len(columns)
    if num_attributes == 0:
        raise InvalidClassIndexError("Dataset has no attributes")

    if isinstance(class_index, str):
        key = class_index.strip()
        if key.lower() == 'first':
            return 0
        if key.lower() == 'last':
            return num_attributes - 1
        if key in columns:
            return list(columns).index(key)
        if not key.isdigit():
            raise InvalidClassIndexError(
                f"Class index must be one of {CLASS_INDEX_ALIASES}, an index or a column name, got '{class_index}'"
            )
        class_index = int(key)

    if isinstance(class_index, bool) or not isinstance(class_index, int):
        raise InvalidClassIndexError(f"Invalid class index: {class_index!r}")
    if not 0 <= class_index < num_attributes:
        raise InvalidClassIndexError(
            f"Class index {class_index} out of range for {num_attributes} attributes"
        )
    return class_index


class ClassRuleMiner(ABC):
    """
    Base class for class association rule mining algorithms.

    These algorithms discover rules in the form: antecedent -> class value,
    where the consequent is always restricted to the designated class
    attribute.
    """

    def __init__(self, num_rules: int = None, class_index: Union[int, str] = 'last', **kwargs):
        if num_rules is not None and num_rules < 1:
            raise ValueError(f"num_rules must be a positive integer or None, got {num_rules}")
        self.num_rules = num_rules
        self.class_index = class_index
        self.config = kwargs

    @abstractmethod
    def mine_rules(self, data: pd.DataFrame) -> Tuple[List[Dict[str, Any]], Dict[str, Any]]:
        """
        Mine class association rules from data.

        Args:
            data: DataFrame with nominal attributes, class attribute included

        Returns:
            Tuple of (rules, stats) where:
                rules: List of dicts with keys:
                    - 'antecedents': list of {'feature', 'value'} dicts
                    - 'consequent': {'feature', 'value'} dict (class value)
                    - 'accuracy': float
                    - 'support', 'confidence': float
                    - Other quality metrics
                stats: Dict with mining statistics
        """
        pass
