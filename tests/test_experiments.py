import logging

import pandas as pd
import pytest

from predictive_apriori.experiments import (
    DataConfig,
    FilterConfig,
    PredictiveAprioriConfig,
    PreprocessingConfig,
    RuleMiningConfig,
    apply_filters,
    create_miner,
    generate_output_filename,
    load_data,
    preprocess_data,
    run_rule_mining,
)
from predictive_apriori.rule_mining import PredictiveAprioriMiner
from predictive_apriori.utils import save_rule_mining_results, save_rules_text, setup_logging, verbosity_to_level


def mining_config(**kwargs):
    miner_config = PredictiveAprioriConfig(num_rules=5, num_random_rules=200)
    return RuleMiningConfig(miner_type='predictive_apriori', miner_config=miner_config, **kwargs)


@pytest.fixture
def weather_csv(tmp_path, weather):
    path = tmp_path / "weather.csv"
    weather.astype(str).to_csv(path, index=False)
    return path


def test_create_miner_passes_options():
    miner = create_miner(mining_config())
    assert isinstance(miner, PredictiveAprioriMiner)
    assert miner.num_rules == 5
    assert miner.num_random_rules == 200


def test_create_miner_rejects_unknown_type():
    config = RuleMiningConfig(miner_type='fpgrowth', miner_config=PredictiveAprioriConfig())
    with pytest.raises(ValueError, match="fpgrowth"):
        create_miner(config)


def test_config_to_dict():
    config = mining_config(filters=[FilterConfig('accuracy', 0.5)])
    as_dict = config.to_dict()
    assert as_dict['miner_config']['num_rules'] == 5
    assert as_dict['miner_config']['class_index'] == 'last'
    assert as_dict['filters'] == [{'metric': 'accuracy', 'threshold': 0.5}]


def test_load_and_preprocess_csv(weather_csv):
    df = load_data(DataConfig(path=str(weather_csv), name='weather'))
    processed = preprocess_data(df, PreprocessingConfig(drop_columns=['temperature'], max_values=10))

    assert list(processed.columns) == ['outlook', 'humidity', 'windy', 'play']
    # read_csv parses the windy column as bool, which is already nominal
    assert isinstance(processed['outlook'].dtype, pd.CategoricalDtype)
    assert isinstance(processed['play'].dtype, pd.CategoricalDtype)


def test_load_data_rejects_unknown_format(tmp_path):
    with pytest.raises(ValueError, match="Unsupported"):
        load_data(DataConfig(path=str(tmp_path / "data.json"), name='data'))


def test_run_rule_mining_applies_filters(weather):
    rules, stats = run_rule_mining(weather, mining_config())
    strict, strict_stats = run_rule_mining(weather, mining_config(filters=[FilterConfig('accuracy', 1.01)]))

    assert 0 < len(rules) <= 5
    assert stats['count'] == len(rules)
    assert strict == []
    assert strict_stats['count'] == 0


def test_apply_filters_chains_thresholds():
    rules = [{'accuracy': 0.9, 'support': 0.1}, {'accuracy': 0.7, 'support': 0.5}, {'accuracy': 0.95, 'support': 0.4}]
    filters = [FilterConfig('accuracy', 0.8), FilterConfig('support', 0.2)]
    assert apply_filters(rules, filters) == [rules[2]]


def test_data_config_defaults_to_last_column(weather):
    config = DataConfig(path='weather.csv', name='weather')
    assert config.get_class_index() == 'last'
    assert config.get_feature_cols(weather) == ['outlook', 'temperature', 'humidity', 'windy']


def test_save_results_to_excel(tmp_path, weather):
    pytest.importorskip("openpyxl")
    rules, stats = run_rule_mining(weather, mining_config())

    path = save_rule_mining_results(rules, stats, tmp_path / "out" / "weather",
                                    parameters={'num_rules': 5}, metadata={'dataset': 'weather'})

    assert path.suffix == '.xlsx'
    sheet = pd.read_excel(path, sheet_name='Rules')
    assert list(sheet['rank']) == list(range(1, len(rules) + 1))
    assert sheet['consequent'].str.startswith('play=').all()
    summary = pd.read_excel(path, sheet_name='Summary')
    assert 'dataset' in set(summary['Metric'])


def test_save_rules_text(tmp_path, weather):
    rules, _ = run_rule_mining(weather, mining_config())

    path = save_rules_text(rules, tmp_path / "weather")
    text = path.read_text()

    assert path.suffix == '.txt'
    assert " 1. " in text
    assert f"Total rules: {len(rules)}" in text
    assert "No rules found." in save_rules_text([], tmp_path / "empty").read_text()


def test_setup_logging_is_idempotent():
    logger = setup_logging(verbosity_to_level(2))
    setup_logging(verbosity_to_level(0))

    assert len(logger.handlers) == 1
    assert logger.level == logging.WARNING


def test_generate_output_filename():
    name = generate_output_filename('rule_mining', 'predictive_apriori', 'weather')
    timestamp, rest = name[:15], name[16:]

    assert timestamp[8] == '_' and timestamp.replace('_', '').isdigit()
    assert rest == 'rule_mining_predictive_apriori_weather'
