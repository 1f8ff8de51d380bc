"""
Run one cluster scheduling simulation and append snapshots to a results file.

Usage:
    python run_simulation.py --policy ar                  # AR, writes ar-sim.out.txt
    python run_simulation.py --policy mixed --seed 7      # Mixed, reproducible
    python run_simulation.py --policy mixed --interval 1  # one tick per second
    python run_simulation.py --help                       # Show options
"""
import argparse
import time

from config import POLICIES, default_config
from metrics import SnapshotFile
from simulator import Simulator
from schedulers.ar import AdvanceReservation
from schedulers.mixed import Mixed

DEFAULT_OUTPUT = {
    "ar": "ar-sim.out.txt",
    "mixed": "mixed-sim.out.txt",
}


def create_scheduler(name):
    """Create a fresh scheduler instance."""
    if name == "ar":
        return AdvanceReservation()
    elif name == "mixed":
        return Mixed()
    raise ValueError(f"Unknown policy {name!r}")


def build_config(args):
    return default_config(
        args.policy,
        seed=args.seed,
        max_completions=args.max_completions,
        record_interval=args.record_interval,
        p_add_resource=args.p_add_resource,
        p_add_job=args.p_add_job,
        p_resource_leave=args.p_leave,
        w_fcfs=args.w_fcfs,
        w_lwf=args.w_lwf,
    )


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Tick-driven cluster simulation: advance reservation vs mixed FCFS/LWF scheduling",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Probabilities are integers out of 1000. Unset options keep the policy defaults:
  ar:    p_add_resource=50 p_add_job=950 p_leave=300
  mixed: p_add_resource=50 p_add_job=200 p_leave=300 w_fcfs=1 w_lwf=1
        """
    )
    parser.add_argument('--policy', choices=POLICIES, default='ar',
                        help='Scheduling policy (default: ar)')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed (default: random)')
    parser.add_argument('--max-completions', type=int, default=None,
                        help='Stop after this many completed jobs (default: 100000)')
    parser.add_argument('--record-interval', type=int, default=None,
                        help='Completions between snapshots (default: 500)')
    parser.add_argument('--p-add-resource', type=int, default=None)
    parser.add_argument('--p-add-job', type=int, default=None)
    parser.add_argument('--p-leave', type=int, default=None,
                        help='Chance a resource leaves after completing a job')
    parser.add_argument('--w-fcfs', type=int, default=None,
                        help='Mixed policy weight of wait time')
    parser.add_argument('--w-lwf', type=int, default=None,
                        help='Mixed policy weight of workload')
    parser.add_argument('--output', default=None,
                        help='Snapshot file (default: <policy>-sim.out.txt)')
    parser.add_argument('--interval', type=float, default=0,
                        help='Seconds to wait between ticks (default: 0, no wait)')
    parser.add_argument('--max-ticks', type=int, default=None,
                        help='Stop after this many ticks even if the target is not reached')
    parser.add_argument('--debug', action='store_true',
                        help='Print every scheduling event')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    config = build_config(args)
    output = args.output or DEFAULT_OUTPUT[args.policy]

    sim = Simulator(config, create_scheduler(args.policy), sink=SnapshotFile(output), debug=args.debug)

    on_tick = None
    if args.interval > 0:
        def on_tick(_):
            time.sleep(args.interval)

    print(f"Running {sim.scheduler.name} until {config.max_completions} jobs complete "
          f"(seed={config.seed}, snapshots every {config.record_interval} -> {output})")
    summary = sim.run(max_ticks=args.max_ticks, on_tick=on_tick)

    print(f"\n{'Ticks':<20}{summary['ticks']:>12}")
    print(f"{'Jobs submitted':<20}{summary['jobs_submitted']:>12}")
    print(f"{'Jobs completed':<20}{summary['completed']:>12}")
    print(f"{'Resources added':<20}{summary['resources_added']:>12}")
    print(f"{'Resources gone':<20}{summary['resources_gone']:>12}")
    print(f"{'Mean utilization':<20}{summary['mean_utilization']:>11.2f}%")
    print(f"{'Mean wait time':<20}{summary['mean_wait_time']:>12.2f}")
    return summary


if __name__ == "__main__":
    main()
