"""
Multi-seed statistical comparison of the AR and Mixed scheduling policies.

Uses Common Random Numbers (CRN): for every seed both policies start from the
same random stream and the same arrival/departure probabilities. Runs a fixed
number of seeds per load scenario with 95% confidence intervals for all metrics
and a paired t-test between the two policies.

Usage:
    python multi_seed_analysis.py                        # Run with default 20 seeds
    python multi_seed_analysis.py --seeds 50             # Override to 50 seeds
    python multi_seed_analysis.py --base-seed 42         # Reproducible seeds 42..61
    python multi_seed_analysis.py --max-completions 5000 # Longer runs
"""

import argparse
import csv
import json
from datetime import datetime
from math import erfc

import numpy as np

from config import default_config
from simulator import Simulator
from run_simulation import create_scheduler

DEBUG = False

POLICY_NAMES = ["ar", "mixed"]
METRICS = ["util", "wait", "throughput"]

# Job arrival probability per tick (out of 1000), shared by both policies
load_scenarios = [
    {"name": "Light Load", "p_add_job": 200},
    {"name": "Medium Load", "p_add_job": 500},
    {"name": "Heavy Load", "p_add_job": 900},
]


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Multi-seed AR vs Mixed scheduling analysis with CRN",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python multi_seed_analysis.py                 # Default: 20 seeds, random base
  python multi_seed_analysis.py --seeds 100     # Run 100 seeds
  python multi_seed_analysis.py --base-seed 42  # Reproducible: seeds 42-61
        """
    )
    parser.add_argument('--seeds', type=int, default=20,
                        help='Number of seeds to run (default: 20)')
    parser.add_argument('--base-seed', type=int, default=None,
                        help='Base seed for reproducibility (default: random). Seeds will be base_seed to base_seed+N-1')
    parser.add_argument('--max-completions', type=int, default=2000,
                        help='Completed jobs per run (default: 2000)')
    parser.add_argument('--record-interval', type=int, default=100,
                        help='Completions between snapshots (default: 100)')
    parser.add_argument('--max-ticks', type=int, default=1000000,
                        help='Safety cap on ticks per run (default: 1000000)')
    return parser.parse_args(argv)


def run_single_trial(scenario, seed, max_completions, record_interval, max_ticks=None):
    """Run both policies on the same seed and scenario (CRN)."""
    results = {}
    for policy in POLICY_NAMES:
        config = default_config(policy, seed=seed, p_add_job=scenario['p_add_job'],
                                max_completions=max_completions, record_interval=record_interval)
        sim = Simulator(config, create_scheduler(policy), debug=DEBUG)
        summary = sim.run(max_ticks=max_ticks)

        # Wait time is sampled at each snapshot; average the samples over the run
        snapshots = sim.stats.snapshots
        if snapshots:
            wait = float(np.mean([s.mean_wait_time for s in snapshots]))
        else:
            wait = summary['mean_wait_time']

        results[policy] = {
            'util': summary['mean_utilization'],
            'wait': wait,
            'throughput': summary['completed'] / max(1, summary['ticks']),
            'completed': summary['completed'],
            'ticks': summary['ticks'],
        }
    return results


def mean_ci(values):
    """Mean and half-width of the normal 95% confidence interval."""
    values = np.asarray(values, dtype=float)
    mean = np.mean(values)
    if len(values) < 2:
        return mean, 0.0
    std_err = np.std(values, ddof=1) / np.sqrt(len(values))
    return mean, 1.96 * std_err


def paired_ttest(x, y):
    """Paired t-test: x vs y. Returns (t_stat, p_value)."""
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    diff = x - y
    mean_diff = np.mean(diff)
    std_diff = np.std(diff, ddof=1) if len(diff) > 1 else 0.0
    se_diff = std_diff / np.sqrt(len(diff))
    t_stat = mean_diff / (se_diff + 1e-10)

    # Normal approximation of the p-value, conservative for n >= 10
    p_value = erfc(abs(t_stat) / np.sqrt(2))

    return t_stat, p_value


def significance(p_value):
    return "***" if p_value < 0.01 else "**" if p_value < 0.05 else "*" if p_value < 0.10 else "ns"


def convert_to_serializable(obj):
    """Convert numpy values to plain Python and tuple keys to strings recursively."""
    if isinstance(obj, dict):
        return {str(k): convert_to_serializable(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [convert_to_serializable(item) for item in obj]
    elif isinstance(obj, np.ndarray):
        return obj.tolist()
    elif isinstance(obj, (np.integer, np.floating)):
        return float(obj)
    else:
        return obj


def compute_stats(all_results):
    """(scenario, policy, metric) -> {mean, std_err, ci_lower, ci_upper, median}"""
    stats_data = {}
    for scenario_name, policies in all_results.items():
        for policy, metric_lists in policies.items():
            for metric_name in METRICS:
                vals = np.array(metric_lists[metric_name], dtype=float)
                mean = np.mean(vals)
                std_err = np.std(vals, ddof=1) / np.sqrt(len(vals)) if len(vals) > 1 else 0.0
                stats_data[(scenario_name, policy, metric_name)] = {
                    'mean': mean,
                    'std_err': std_err,
                    'ci_lower': mean - 1.96 * std_err,
                    'ci_upper': mean + 1.96 * std_err,
                    'median': np.median(vals),
                }
    return stats_data


def write_stats_csv(stats_data, path='multi_seed_stats.csv'):
    with open(path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(['Load', 'Policy', 'Metric', 'Mean', 'StdErr', 'CILower', 'CIUpper', 'Median'])
        for (load, policy, metric), stat in sorted(stats_data.items()):
            writer.writerow([
                load, policy, metric,
                f"{stat['mean']:.6f}",
                f"{stat['std_err']:.6f}",
                f"{stat['ci_lower']:.6f}",
                f"{stat['ci_upper']:.6f}",
                f"{stat['median']:.6f}",
            ])


def main(argv=None):
    args = parse_args(argv)
    max_seeds = args.seeds
    base_seed = args.base_seed if args.base_seed is not None else int(np.random.randint(0, 2**31))

    print("=" * 100)
    print(f"Multi-Seed Scheduling Analysis: {max_seeds} Seeds with Common Random Numbers (CRN)")
    print("=" * 100)
    print(f"\nConfiguration:")
    print(f"  Seeds: {base_seed} to {base_seed + max_seeds - 1}")
    print(f"  Completions per run: {args.max_completions}")
    print(f"  Timestamp: {datetime.now().isoformat()}")

    all_results = {}  # {scenario_name: {policy: {metric: [values across seeds]}}}
    seed_metadata = {
        'max_seeds': max_seeds,
        'base_seed': base_seed,
        'max_completions': args.max_completions,
        'record_interval': args.record_interval,
        'timestamp': datetime.now().isoformat(),
        'scenarios': {},
    }

    for scenario in load_scenarios:
        name = scenario['name']
        all_results[name] = {p: {m: [] for m in METRICS + ['completed']} for p in POLICY_NAMES}

        print(f"\n{'=' * 100}")
        print(f"{name} (p_add_job={scenario['p_add_job']}/1000)")
        print("=" * 100)
        print(f"{'Seed':>4}  {'AR util':>10} {'Mixed util':>10}  {'AR wait':>10} {'Mixed wait':>10}")
        print("-" * 100)

        seeds_used = []
        for seed_idx in range(max_seeds):
            trial_seed = base_seed + seed_idx
            seeds_used.append(trial_seed)
            trial = run_single_trial(scenario, trial_seed, args.max_completions,
                                     args.record_interval, args.max_ticks)

            for policy in POLICY_NAMES:
                for metric in METRICS + ['completed']:
                    all_results[name][policy][metric].append(trial[policy][metric])

            print(f"{seed_idx + 1:>4}  {trial['ar']['util']:>10.2f} {trial['mixed']['util']:>10.2f}  "
                  f"{trial['ar']['wait']:>10.1f} {trial['mixed']['wait']:>10.1f}")

        seed_metadata['scenarios'][name] = {
            'n_seeds': max_seeds,
            'seeds_used': seeds_used,
            'p_add_job': scenario['p_add_job'],
        }

        print("-" * 100)
        print(f"{'Policy':<10}  {'Util %':>16}  {'Wait':>18}  {'Jobs/tick':>16}")
        for policy in POLICY_NAMES:
            data = all_results[name][policy]
            util_mean, util_ci = mean_ci(data['util'])
            wait_mean, wait_ci = mean_ci(data['wait'])
            tput_mean, tput_ci = mean_ci(data['throughput'])
            print(f"{policy:<10}  {util_mean:>8.2f}±{util_ci:<7.2f}  {wait_mean:>9.1f}±{wait_ci:<8.1f}  "
                  f"{tput_mean:>8.4f}±{tput_ci:<7.4f}")

        print("\nPaired t-tests (AR - Mixed):")
        for metric in METRICS:
            t_stat, p_value = paired_ttest(all_results[name]['ar'][metric], all_results[name]['mixed'][metric])
            print(f"  {metric:<12} t={t_stat:+.2f}, p={p_value:.3f} {significance(p_value)}")

    print("\nSignificance levels: *** p<0.01, ** p<0.05, * p<0.10, ns = not significant")

    with open('multi_seed_results.json', 'w') as f:
        json.dump(convert_to_serializable(all_results), f, indent=2)
    print("\n✓ Results saved to multi_seed_results.json")

    with open('multi_seed_metadata.json', 'w') as f:
        json.dump(seed_metadata, f, indent=2)
    print("✓ Metadata saved to multi_seed_metadata.json")
    print(f"  Reproducibility: Run with --base-seed {base_seed} to recreate")

    write_stats_csv(compute_stats(all_results))
    print("✓ Pre-computed stats saved to multi_seed_stats.csv")
    print("  Run: python plot_results.py")
    return all_results


if __name__ == "__main__":
    main()
