import pandas as pd
from datetime import datetime
from pathlib import Path
from typing import List, Dict, Any, Tuple

from predictive_apriori.preprocessing.nominal import to_nominal
from predictive_apriori.rule_mining.predictive_apriori_miner import PredictiveAprioriMiner
from predictive_apriori.postprocessing.rule import filter_rules

from .config import DataConfig, PreprocessingConfig, RuleMiningConfig, FilterConfig


def load_data(config: DataConfig) -> pd.DataFrame:
    path = Path(config.path)
    if path.suffix == '.csv':
        return pd.read_csv(path, **config.read_options)
    elif path.suffix in ['.xlsx', '.xls']:
        return pd.read_excel(path, **config.read_options)
    elif path.suffix == '.parquet':
        return pd.read_parquet(path, **config.read_options)
    else:
        raise ValueError(f"Unsupported file format: {path.suffix}")


def preprocess_data(df: pd.DataFrame, config: PreprocessingConfig) -> pd.DataFrame:
    if config.drop_columns:
        df = df.drop(columns=config.drop_columns)
    return to_nominal(df, columns=config.nominal_columns, max_values=config.max_values)


def create_miner(config: RuleMiningConfig):
    miner_type = config.miner_type.lower()

    if miner_type == 'predictive_apriori':
        cfg = config.miner_config
        return PredictiveAprioriMiner(
            num_rules=cfg.num_rules,
            class_index=cfg.class_index,
            margin=cfg.margin,
            num_intervals=cfg.num_intervals,
            num_random_rules=cfg.num_random_rules,
            random_state=cfg.random_state,
            max_items=cfg.max_items
        )

    else:
        raise ValueError(f"Unknown miner type: {miner_type}")


def apply_filters(data: List[Dict], filters: List[FilterConfig]) -> List[Dict]:
    result = data
    for f in filters:
        result = filter_rules(result, criterion=f.metric, threshold=f.threshold)
    return result


def run_rule_mining(
    data: pd.DataFrame,
    config: RuleMiningConfig
) -> Tuple[List[Dict], Dict[str, Any]]:
    miner = create_miner(config)

    rules, stats = miner.mine_rules(data)
    rules = apply_filters(rules, config.filters)
    stats['count'] = len(rules)

    return rules, stats


def generate_output_filename(
    experiment_name: str,
    miner_type: str,
    dataset_name: str
) -> str:
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    return f"{timestamp}_{experiment_name}_{miner_type}_{dataset_name}"
