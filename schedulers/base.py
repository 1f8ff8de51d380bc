"""
Abstract base class for cluster scheduling policies.

Every policy implements two per-tick hooks, called by the simulator in order:
1. execute: advance already-matched jobs (input data transfer, then execution)
2. try_schedule: match at most one waiting job to a resource

Subclasses implement concrete policies (advance reservation, mixed FCFS/LWF).
"""
from abc import ABC, abstractmethod


class Scheduler(ABC):
    name = None

    @abstractmethod
    def execute(self, sim):
        """
        Advance transferring and running jobs by one tick.

        Args:
            sim: Simulator instance (provides access to cluster, rng, config)
        """
        pass

    @abstractmethod
    def try_schedule(self, sim):
        """
        Attempt to bind one waiting job to a resource.

        Args:
            sim: Simulator instance

        Returns:
            The job that was scheduled, or None if nothing could be matched
        """
        pass
