from .excel_io import (
    save_rule_mining_results,
    save_rules_text,
    format_rule_for_excel
)
from .logging_utils import setup_logging, verbosity_to_level

__all__ = [
    'save_rule_mining_results',
    'save_rules_text',
    'format_rule_for_excel',
    'setup_logging',
    'verbosity_to_level'
]
