"""
Rule Mining Experiment: Predictive Apriori class association rules

Loads a categorical dataset, declares its columns nominal and mines the N
class association rules with the highest expected predictive accuracy.
"""
from pathlib import Path
from datetime import datetime

from predictive_apriori.experiments.config import (
    DataConfig, PreprocessingConfig, PredictiveAprioriConfig, RuleMiningConfig, FilterConfig
)
from predictive_apriori.experiments.base import (
    load_data, preprocess_data, run_rule_mining, generate_output_filename
)
from predictive_apriori.postprocessing.rule import format_rules
from predictive_apriori.utils.excel_io import save_rule_mining_results, save_rules_text
from predictive_apriori.utils.logging_utils import setup_logging, verbosity_to_level

# =============================================================================
# CONFIGURATION
# =============================================================================

VERBOSITY = 1

DATA_CONFIG = DataConfig(
    path="../../data/raw/weather.nominal.csv",
    name="weather",
    class_column=None  # last column
)

PREPROCESSING_CONFIG = PreprocessingConfig.default()

MINING_CONFIG = RuleMiningConfig(
    miner_type='predictive_apriori',
    miner_config=PredictiveAprioriConfig(
        num_rules=100,
        class_index=DATA_CONFIG.get_class_index(),
        max_items=None
    ),
    filters=[FilterConfig(metric='accuracy', threshold=0.0)]
)

OUTPUT_DIR = "../../out/predictive_apriori"

setup_logging(verbosity_to_level(VERBOSITY))


# =============================================================================
# EXPERIMENT
# =============================================================================

def run_experiment():
    print("=" * 70)
    print("PREDICTIVE APRIORI RULE MINING EXPERIMENT")
    print("=" * 70)

    # Load data
    print("\n[1] Loading data...")
    df = load_data(DATA_CONFIG)
    print(f"  Shape: {df.shape}")

    # Declare nominal attributes
    print("\n[2] Preprocessing...")
    processed_df = preprocess_data(df, PREPROCESSING_CONFIG)
    print(f"  Attributes: {list(processed_df.columns)}")

    # Mine rules
    print("\n[3] Mining rules...")
    rules, stats = run_rule_mining(processed_df, MINING_CONFIG)
    print(f"  Mined: {len(rules)} rules in {stats['execution_time']:.2f}s")
    print(f"  Final support floor: {stats['final_premise_count']}")
    print(f"  Levels searched: {stats['levels_searched']}")

    print("\nBest rules found:\n")
    print(format_rules(rules))

    # Save results
    print(f"\n{'=' * 70}")
    print("SAVING RESULTS")
    print("=" * 70)

    output_path = Path(OUTPUT_DIR)
    output_path.mkdir(parents=True, exist_ok=True)

    filename = generate_output_filename('rule_mining', MINING_CONFIG.miner_type, DATA_CONFIG.name)

    parameters = {
        'data_path': DATA_CONFIG.path,
        **MINING_CONFIG.to_dict()['miner_config'],
        'filters': str([f.to_dict() for f in MINING_CONFIG.filters]),
        'timestamp': datetime.now().isoformat()
    }

    save_rule_mining_results(
        rules,
        stats,
        output_path / filename,
        parameters=parameters,
        metadata={'dataset': DATA_CONFIG.name, 'records': len(processed_df)}
    )
    save_rules_text(rules, output_path / filename, metadata={'dataset': DATA_CONFIG.name})

    print(f"\n{'=' * 70}")
    print("EXPERIMENT COMPLETE")
    print("=" * 70)


if __name__ == '__main__':
    run_experiment()
