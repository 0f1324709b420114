from .config import (
    DataConfig,
    PreprocessingConfig,
    PredictiveAprioriConfig,
    RuleMiningConfig,
    FilterConfig
)
from .base import (
    load_data,
    preprocess_data,
    run_rule_mining,
    create_miner,
    apply_filters,
    generate_output_filename
)

__all__ = [
    'DataConfig',
    'PreprocessingConfig',
    'PredictiveAprioriConfig',
    'RuleMiningConfig',
    'FilterConfig',
    'load_data',
    'preprocess_data',
    'run_rule_mining',
    'create_miner',
    'apply_filters',
    'generate_output_filename'
]
