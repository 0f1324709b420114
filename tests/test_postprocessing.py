import numpy as np
import pandas as pd
import pytest

from predictive_apriori.postprocessing.rule import (
    filter_rules,
    filter_rules_by_antecedent,
    filter_rules_by_consequent,
    filter_rules_by_pattern,
    format_rule,
    format_rules,
)
from predictive_apriori.preprocessing.nominal import to_nominal


@pytest.fixture
def rules():
    return [
        {
            'antecedents': [{'feature': 'outlook', 'value': 'overcast'}],
            'consequent': {'feature': 'play', 'value': 'yes'},
            'accuracy': 0.91234, 'support': 4 / 14, 'confidence': 1.0,
            'support_count': 4, 'premise_count': 4,
        },
        {
            'antecedents': [{'feature': 'humidity', 'value': 'high'}, {'feature': 'outlook', 'value': 'sunny'}],
            'consequent': {'feature': 'play', 'value': 'no'},
            'accuracy': 0.87, 'support': 3 / 14, 'confidence': 1.0,
            'support_count': 3, 'premise_count': 3,
        },
    ]


def test_filter_rules_by_metric(rules):
    assert filter_rules(rules, 'accuracy', 0.9) == rules[:1]
    assert filter_rules(rules, 'missing_metric', 0.0) == []


def test_filter_by_consequent_and_antecedent(rules):
    assert filter_rules_by_consequent(rules, ['play=no']) == rules[1:]
    assert filter_rules_by_antecedent(rules, ['OUTLOOK=']) == rules
    assert filter_rules_by_pattern(rules, antecedent_excludes=['humidity']) == rules[:1]
    assert filter_rules_by_pattern(rules, antecedent_contains=['humidity', 'overcast']) == []
    assert filter_rules_by_pattern(rules, antecedent_contains=['humidity', 'overcast'], match_any=True) == rules


def test_format_rule(rules):
    assert format_rule(rules[0], 1) == " 1. outlook=overcast 4 ==> play=yes 4    acc:(0.91234)"
    assert format_rule(rules[1]).startswith("humidity=high outlook=sunny 3 ==> play=no 3")


def test_format_rules_listing(rules):
    lines = format_rules(rules).splitlines()
    assert len(lines) == 2
    assert lines[1].startswith(" 2. ")
    assert format_rules([]) == "No rules found."


def test_to_nominal_converts_string_columns():
    df = pd.DataFrame({'a': ['x', 'y', None], 'n': [1.5, 2.0, 3.0]})
    out = to_nominal(df)

    assert isinstance(out['a'].dtype, pd.CategoricalDtype)
    assert list(out['a'].cat.categories) == ['x', 'y']
    assert out['a'].isna().sum() == 1
    assert out['n'].dtype == np.float64
    assert not isinstance(df['a'].dtype, pd.CategoricalDtype)


def test_to_nominal_binary_columns():
    out = to_nominal(pd.DataFrame({'flag': [0, 1, 1]}), columns=['flag'])
    assert list(out['flag']) == ['False', 'True', 'True']
    assert list(out['flag'].cat.categories) == ['False', 'True']


def test_to_nominal_guards_against_free_text():
    df = pd.DataFrame({'id': [f"row{i}" for i in range(10)]})
    with pytest.raises(ValueError, match="max_values"):
        to_nominal(df, max_values=5)
    with pytest.raises(ValueError, match="not found"):
        to_nominal(df, columns=['missing'])
