from .rule import (
    filter_rules,
    filter_rules_by_pattern,
    filter_rules_by_consequent,
    filter_rules_by_antecedent,
    format_rule,
    format_rules
)

__all__ = [
    'filter_rules',
    'filter_rules_by_pattern',
    'filter_rules_by_consequent',
    'filter_rules_by_antecedent',
    'format_rule',
    'format_rules'
]
