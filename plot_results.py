#!/usr/bin/env python3
"""
Load simulation results and generate tables and figures.

Two inputs, each optional:
1. Snapshot files written by run_simulation.py (utilization and wait-time traces)
2. multi_seed_stats.csv written by multi_seed_analysis.py (per-load means with 95% CI)

Usage:
    python plot_results.py                                   # default file names
    python plot_results.py --snapshots ar-sim.out.txt mixed-sim.out.txt
"""
import argparse
import csv
import os

import numpy as np

try:
    import matplotlib
    matplotlib.use('Agg')  # Non-interactive backend
    import matplotlib.pyplot as plt
    MATPLOTLIB_AVAILABLE = True
except ImportError:
    MATPLOTLIB_AVAILABLE = False

from metrics import load_snapshots

COLORS = {
    'ar': '#1f77b4',     # blue
    'mixed': '#d62728',  # red
}
LABELS = {'ar': 'AR', 'mixed': 'Mixed'}

POLICY_ORDER = ["ar", "mixed"]
LOAD_ORDER = ['Light Load', 'Medium Load', 'Heavy Load']
METRIC_TITLES = {
    'util': 'Mean Resource Utilization (%)',
    'wait': 'Mean Job Wait Time (ticks)',
    'throughput': 'Throughput (jobs/tick)',
}


def load_stats(csv_file="multi_seed_stats.csv"):
    """Load pre-computed stats from CSV, keyed by (load, policy, metric)."""
    stats = {}
    with open(csv_file, 'r') as f:
        reader = csv.DictReader(f)
        for row in reader:
            key = (row['Load'], row['Policy'], row['Metric'])
            stats[key] = {
                'mean': float(row['Mean']),
                'std_err': float(row['StdErr']),
                'ci_lower': float(row['CILower']),
                'ci_upper': float(row['CIUpper']),
                'median': float(row['Median']),
            }
    print(f"✓ Loaded pre-computed stats from {csv_file}")
    return stats


def get_stat(stats, load, policy, metric):
    """Retrieve pre-computed stat, zeros if missing."""
    return stats.get((load, policy, metric), {'mean': 0, 'median': 0, 'ci_lower': 0, 'ci_upper': 0})


def policy_from_path(path):
    """ar-sim.out.txt -> 'ar'; unknown names fall back to the file name."""
    base = os.path.basename(path)
    prefix = base.split('-', 1)[0]
    return prefix if prefix in COLORS else base


def print_tables(stats):
    for metric, title in METRIC_TITLES.items():
        print("\n" + "=" * 70)
        print(title.upper())
        print("=" * 70)
        print("Load".ljust(16) + "".join(LABELS[p].rjust(24) for p in POLICY_ORDER))
        print("-" * 70)
        for load in LOAD_ORDER:
            row = load.ljust(16)
            for policy in POLICY_ORDER:
                stat = get_stat(stats, load, policy, metric)
                row += f"{stat['mean']:.3f} ({stat['ci_lower']:.3f}-{stat['ci_upper']:.3f})".rjust(24)
            print(row)


def print_traces(traces):
    print("\n" + "=" * 70)
    print("SNAPSHOT TRACES (last record)")
    print("=" * 70)
    print("Policy".ljust(12) + "Completed".rjust(12) + "Util %".rjust(12) + "Wait".rjust(12) + "Submitted".rjust(12))
    for policy, snapshots in traces.items():
        if not snapshots:
            continue
        last = snapshots[-1]
        print(str(policy).ljust(12) + f"{last.completed}".rjust(12) + f"{last.mean_utilization:.2f}".rjust(12)
              + f"{last.mean_wait_time:.1f}".rjust(12) + f"{last.jobs_submitted}".rjust(12))


def fig_traces(traces, output='snapshot_traces.png'):
    """Utilization and wait time against completed jobs, one line per policy."""
    fig, axes = plt.subplots(1, 2, figsize=(12, 4.5))

    for policy, snapshots in traces.items():
        if not snapshots:
            continue
        completed = [s.completed for s in snapshots]
        color = COLORS.get(policy)
        label = LABELS.get(policy, policy)
        axes[0].plot(completed, [s.mean_utilization for s in snapshots], label=label, color=color)
        axes[1].plot(completed, [s.mean_wait_time for s in snapshots], label=label, color=color)

    axes[0].set_ylabel(METRIC_TITLES['util'])
    axes[1].set_ylabel(METRIC_TITLES['wait'])
    for ax in axes:
        ax.set_xlabel('Completed jobs')
        ax.grid(alpha=0.3)
        ax.legend()

    plt.tight_layout()
    plt.savefig(output, dpi=150)
    plt.close(fig)
    print(f"✓ Saved {output}")


def fig_load_comparison(stats, output='load_comparison.png'):
    """Grouped bars per load with 95% CI error bars, one panel per metric."""
    fig, axes = plt.subplots(1, len(METRIC_TITLES), figsize=(16, 4.5))
    x_pos = np.arange(len(LOAD_ORDER))
    width = 0.35

    for ax, (metric, title) in zip(axes, METRIC_TITLES.items()):
        for idx, policy in enumerate(POLICY_ORDER):
            vals = np.array([get_stat(stats, load, policy, metric)['mean'] for load in LOAD_ORDER])
            lower = np.array([get_stat(stats, load, policy, metric)['ci_lower'] for load in LOAD_ORDER])
            upper = np.array([get_stat(stats, load, policy, metric)['ci_upper'] for load in LOAD_ORDER])
            errors = [vals - lower, upper - vals]
            ax.bar(x_pos + (idx - 0.5) * width, vals, width, yerr=errors, capsize=3,
                   label=LABELS[policy], color=COLORS[policy], alpha=0.85)
        ax.set_title(title)
        ax.set_xticks(x_pos)
        ax.set_xticklabels(LOAD_ORDER)
        ax.grid(axis='y', alpha=0.3)
    axes[0].legend()

    plt.tight_layout()
    plt.savefig(output, dpi=150)
    plt.close(fig)
    print(f"✓ Saved {output}")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Tables and figures for simulation results")
    parser.add_argument('--stats', default='multi_seed_stats.csv',
                        help='Multi-seed stats CSV (default: multi_seed_stats.csv)')
    parser.add_argument('--snapshots', nargs='*', default=['ar-sim.out.txt', 'mixed-sim.out.txt'],
                        help='Snapshot files to trace (default: ar-sim.out.txt mixed-sim.out.txt)')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    traces = {}
    for path in args.snapshots:
        if os.path.exists(path):
            traces[policy_from_path(path)] = load_snapshots(path)
        else:
            print(f"✗ {path} not found, skipping")

    stats = None
    if os.path.exists(args.stats):
        stats = load_stats(args.stats)
    else:
        print(f"✗ {args.stats} not found")
        print(f"  Run: python multi_seed_analysis.py")

    if traces:
        print_traces(traces)
    if stats:
        print_tables(stats)

    if not MATPLOTLIB_AVAILABLE:
        print("\nmatplotlib not installed, skipping figures")
        return

    if traces:
        fig_traces(traces)
    if stats:
        fig_load_comparison(stats)


if __name__ == "__main__":
    main()
