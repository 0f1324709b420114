import pandas as pd
from typing import List


def to_nominal(
        df: pd.DataFrame,
        columns: List[str] = None,
        max_values: int = None
) -> pd.DataFrame:
    """
    Declare string or integer-coded columns as nominal attributes.

    Converts the selected columns to ``category`` dtype, keeping missing
    values as missing. Binary 0/1 columns become 'False'/'True' categories.

    Args:
        df: Input DataFrame
        columns: Columns to convert (None = every object/string column)
        max_values: Refuse columns with more distinct values than this
                    (guards against converting free text or identifiers)

    Returns:
        DataFrame copy with the converted columns
    """
    df = df.copy()
    if columns is None:
        columns = [
            c for c in df.columns
            if pd.api.types.is_object_dtype(df[c]) or pd.api.types.is_string_dtype(df[c])
        ]

    for col in columns:
        if col not in df.columns:
            raise ValueError(f"Column '{col}' not found in data")
        if isinstance(df[col].dtype, pd.CategoricalDtype):
            continue

        values = df[col].dropna()
        unique_vals = values.unique()
        if max_values is not None and len(unique_vals) > max_values:
            raise ValueError(
                f"Column '{col}' has {len(unique_vals)} distinct values, more than max_values={max_values}"
            )

        if len(unique_vals) <= 2 and set(unique_vals).issubset({0, 1, True, False}):
            df[col] = df[col].map({0: 'False', 1: 'True'}, na_action='ignore')
            df[col] = pd.Categorical(df[col], categories=['False', 'True'])
        else:
            df[col] = pd.Categorical(df[col].where(df[col].isna(), df[col].astype(str)))

    return df
