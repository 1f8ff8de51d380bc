"""
Performance metrics for scheduler evaluation.

Tracks two metrics over a run:
1. Mean Utilization: average % of lifetime that departed resources spent running
   jobs (0-100, higher is better). A resource is folded in when it leaves.
2. Mean Wait Time: average number of ticks live jobs have spent before starting
   (lower is better), sampled at each snapshot.

Every `record_interval` completions a snapshot line is appended to the sink:

    <completed> <mean_utilization_percent> <mean_wait_time> <jobs_submitted>
"""
from collections import namedtuple

import numpy as np

from cluster import LEAVING
from jobs import DONE

Snapshot = namedtuple("Snapshot", ["completed", "mean_utilization", "mean_wait_time", "jobs_submitted"])


def mean_wait_time(jobs):
    """Mean wait time over the given jobs, 0.0 when there are none."""
    if not jobs:
        return 0.0
    return float(np.mean([j.wait_time for j in jobs]))


def running_mean(mean, n, x):
    """Fold sample x into a mean of n samples: (mean * n + x) / (n + 1)."""
    return (mean * n + x) / (n + 1)


def format_snapshot(snapshot):
    return (f"{snapshot.completed} {snapshot.mean_utilization:.6f} "
            f"{snapshot.mean_wait_time:.6f} {snapshot.jobs_submitted}\n")


def parse_snapshot(line):
    completed, util, wait, submitted = line.split()
    return Snapshot(int(completed), float(util), float(wait), int(submitted))


def load_snapshots(path):
    """Read a snapshot file back; blank lines are skipped."""
    with open(path, "r") as f:
        return [parse_snapshot(line) for line in f if line.strip()]


class SnapshotFile:
    """Append-only snapshot sink. A failed write drops that snapshot."""

    def __init__(self, path):
        self.path = path

    def write(self, snapshot, sim=None):
        try:
            with open(self.path, "a") as f:
                f.write(format_snapshot(snapshot))
        except OSError as e:
            if sim is not None:
                sim.log(f"Snapshot at {snapshot.completed} dropped: {e}")
            return False
        return True


class StatsRecorder:
    def __init__(self, record_interval, sink=None):
        self.record_interval = record_interval
        self.sink = sink
        self.completed = 0
        self.mean_utilization = 0.0
        self.resources_gone = 0
        self.mean_wait_time = 0.0
        self.snapshots = []

    def trace(self, sim):
        """
        Account for one tick of the current pools.

        Must run before the purge: jobs that finished last tick are counted here
        and resources that decided to leave are folded into the utilization mean.
        """
        for job in sim.cluster.jobs:
            if job.state == DONE:
                self.completed += 1
                if self.completed % self.record_interval == 0:
                    self.record(sim)
            elif job.is_waiting:
                job.wait_time += 1

        for r in sim.cluster.resources:
            r.total_time += 1
            if r.state == LEAVING:
                self.mean_utilization = running_mean(self.mean_utilization, self.resources_gone, r.utilization())
                self.resources_gone += 1

    def record(self, sim):
        self.mean_wait_time = mean_wait_time(sim.cluster.jobs)
        snapshot = Snapshot(self.completed, self.mean_utilization, self.mean_wait_time,
                            sim.cluster.job_number)
        self.snapshots.append(snapshot)
        sim.log(f"Snapshot: {format_snapshot(snapshot).strip()}")
        if self.sink is not None:
            self.sink.write(snapshot, sim)
        return snapshot

    def summary(self, sim):
        return {
            'completed': self.completed,
            'mean_utilization': self.mean_utilization,
            'mean_wait_time': mean_wait_time(sim.cluster.jobs),
            'resources_gone': self.resources_gone,
            'jobs_submitted': sim.cluster.job_number,
            'resources_added': sim.cluster.resource_number,
            'snapshots': len(self.snapshots),
            'ticks': sim.time,
        }
