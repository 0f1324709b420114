from typing import Any, Dict, List


def filter_rules(rules, criterion: str, threshold: float):
    """
    Filters rules based on a criterion >= threshold.

    Args:
        rules: List of rule dictionaries
        criterion: The rule metric to filter on (e.g., 'accuracy', 'support', 'confidence')
        threshold: Minimum value for the criterion (inclusive)

    Returns:
        List of rules meeting the criterion
    """
    return [rule for rule in rules if rule.get(criterion, float("-inf")) >= threshold]


def _item_strings(val) -> set:
    """Normalize an antecedent or consequent to a set of lowercase 'feature=value' strings."""
    if val is None:
        return set()
    if isinstance(val, dict):
        val = [val]
    result = set()
    for item in val:
        if isinstance(item, dict) and 'feature' in item:
            result.add(f"{item['feature']}={item['value']}".lower())
        else:
            result.add(str(item).lower())
    return result


def filter_rules_by_pattern(
    rules,
    antecedent_contains: list = None,
    consequent_contains: list = None,
    antecedent_excludes: list = None,
    consequent_excludes: list = None,
    match_any: bool = False
):
    """
    Filter rules by antecedent/consequent substring patterns.

    Patterns are matched case-insensitively against 'feature=value' strings.

    Args:
        rules: List of rule dictionaries
        antecedent_contains: Patterns that must appear in the antecedent
        consequent_contains: Patterns that must appear in the consequent
        antecedent_excludes: Patterns that must NOT appear in the antecedent
        consequent_excludes: Patterns that must NOT appear in the consequent
        match_any: If True, match if ANY pattern matches. If False, ALL must match.

    Returns:
        List of filtered rules
    """
    def matches(items, patterns):
        if not patterns:
            return True
        hits = [any(p.lower() in item for item in items) for p in patterns]
        return any(hits) if match_any else all(hits)

    def excludes(items, patterns):
        if not patterns:
            return True
        return not any(p.lower() in item for item in items for p in patterns)

    filtered = []
    for rule in rules:
        ant = _item_strings(rule.get('antecedents'))
        cons = _item_strings(rule.get('consequent'))
        if (matches(ant, antecedent_contains) and matches(cons, consequent_contains)
                and excludes(ant, antecedent_excludes) and excludes(cons, consequent_excludes)):
            filtered.append(rule)

    return filtered


def filter_rules_by_consequent(rules, targets: list, match_any: bool = True):
    """
    Filter rules to keep only those predicting one of the target class values.

    Args:
        rules: List of rule dictionaries
        targets: List of target patterns (e.g., ['play=yes'])
        match_any: If True, match if any target matches
    """
    return filter_rules_by_pattern(rules, consequent_contains=targets, match_any=match_any)


def filter_rules_by_antecedent(rules, patterns: list, match_any: bool = True):
    """Filter rules to keep only those with antecedent matching patterns."""
    return filter_rules_by_pattern(rules, antecedent_contains=patterns, match_any=match_any)


def format_rule(rule: Dict[str, Any], index: int = None, decimals: int = 5) -> str:
    """
    Render a rule as a single line: ' 1. A=1 6 ==> C=1 6    acc:(0.87654)'.

    The counts after each side are the premise and rule support counts.
    """
    antecedent = ' '.join(f"{item['feature']}={item['value']}" for item in rule['antecedents'])
    consequent = f"{rule['consequent']['feature']}={rule['consequent']['value']}"
    prefix = f"{index:2d}. " if index is not None else ""
    return (f"{prefix}{antecedent} {rule['premise_count']} ==> {consequent} {rule['support_count']}"
            f"    acc:({rule['accuracy']:.{decimals}f})")


def format_rules(rules: List[Dict[str, Any]]) -> str:
    """Numbered listing of rules, one per line."""
    if not rules:
        return "No rules found."
    return '\n'.join(format_rule(rule, i) for i, rule in enumerate(rules, 1))
