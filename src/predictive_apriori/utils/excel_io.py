import pandas as pd
from pathlib import Path
from datetime import datetime
from typing import Dict, List, Any, Union

from predictive_apriori.postprocessing.rule import format_rule


def save_rule_mining_results(
    rules: List[Dict[str, Any]],
    stats: Dict[str, Any],
    output_path: Union[str, Path],
    parameters: Dict[str, Any] = None,
    metadata: Dict[str, Any] = None
):
    """
    Save rule mining results to Excel with multiple sheets.

    Sheets:
        - Rules: All mined rules, best first, with metrics
        - Summary: Aggregate statistics
        - Parameters: Algorithm parameters used

    Args:
        rules: List of rule dictionaries
        stats: Statistics dictionary from mining
        output_path: Output file path (will add .xlsx if needed)
        parameters: Algorithm parameters used
        metadata: Additional metadata (dataset name, timestamp, etc.)
    """
    output_path = Path(output_path)
    if output_path.suffix != '.xlsx':
        output_path = output_path.with_suffix('.xlsx')
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with pd.ExcelWriter(output_path, engine='openpyxl') as writer:
        # Sheet 1: Rules
        if rules:
            rules_df = pd.DataFrame([format_rule_for_excel(r) for r in rules])
            rules_df.insert(0, 'rank', range(1, len(rules_df) + 1))
            rules_df.to_excel(writer, sheet_name='Rules', index=False)

        # Sheet 2: Summary
        summary_data = {
            'Metric': list(stats.keys()),
            'Value': list(stats.values())
        }
        if metadata:
            summary_data['Metric'].extend(list(metadata.keys()))
            summary_data['Value'].extend(list(metadata.values()))
        summary_df = pd.DataFrame(summary_data)
        summary_df.to_excel(writer, sheet_name='Summary', index=False)

        # Sheet 3: Parameters
        if parameters:
            params_df = pd.DataFrame({
                'Parameter': list(parameters.keys()),
                'Value': [str(v) for v in parameters.values()]
            })
            params_df.to_excel(writer, sheet_name='Parameters', index=False)

    print(f"Results saved to: {output_path}")
    return output_path


def format_rule_for_excel(rule: Dict[str, Any]) -> Dict[str, Any]:
    """
    Format a rule dictionary for Excel output with human-readable antecedent/consequent.

    - Format: "feature1=value1 AND feature2=value2"
    - Parseable by splitting on " AND " then "="
    """
    formatted = rule.copy()

    for key in ['antecedents', 'consequent']:
        if key in formatted:
            formatted[key] = _format_itemset(formatted[key])

    return formatted


def _format_itemset(val: Any) -> str:
    """Convert itemset to 'feature=value AND ...' string format."""
    if isinstance(val, dict):
        val = [val]
    if isinstance(val, (list, tuple)):
        parts = []
        for item in val:
            if isinstance(item, dict) and 'feature' in item:
                parts.append(f"{item['feature']}={item['value']}")
            else:
                parts.append(str(item))
        return ' AND '.join(parts)
    return str(val)


def save_rules_text(
    rules: List[Dict[str, Any]],
    output_path: Union[str, Path],
    title: str = "BEST RULES FOUND",
    metadata: Dict[str, Any] = None
) -> Path:
    """
    Save rules in human-readable text format, one numbered rule per line.

    Args:
        rules: List of rule dictionaries as produced by the miner
        output_path: Output file path (will add .txt if needed)
        title: Title for the output file header
        metadata: Optional metadata to include in header
    """
    output_path = Path(output_path)
    if output_path.suffix != '.txt':
        output_path = output_path.with_suffix('.txt')
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w') as f:
        f.write("=" * 80 + "\n")
        f.write(f"{title}\n")
        f.write(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
        if metadata:
            for key, val in metadata.items():
                f.write(f"{key}: {val}\n")
        f.write("=" * 80 + "\n\n")

        if not rules:
            f.write("No rules found.\n")
        else:
            for i, rule in enumerate(rules, 1):
                f.write(format_rule(rule, i) + "\n")
            f.write("\n" + "=" * 80 + "\n")
            f.write(f"Total rules: {len(rules)}\n")

    print(f"Rules saved to: {output_path}")
    return output_path
