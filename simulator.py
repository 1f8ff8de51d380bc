"""
Tick-driven simulation kernel for cluster scheduling.

One tick runs, strictly in order:
- Stats trace (age waiting jobs, count completions, fold departed resources)
- Admission (purge finished/departed entities, maybe add a resource or job)
- Execute (advance data transfers and running jobs)
- Schedule (match at most one waiting job)

The run ends once the configured number of jobs has completed. The kernel never
blocks: callers decide the pace by calling tick() or run().
"""
from cluster import Cluster
from metrics import StatsRecorder
from workload import Admission, make_rng


class Simulator:
    def __init__(self, config, scheduler, sink=None, rng=None, debug=False):
        self.config = config
        self.scheduler = scheduler
        self.cluster = Cluster()
        self.rng = rng if rng is not None else make_rng(config.seed)
        self.admission = Admission(config)
        self.stats = StatsRecorder(config.record_interval, sink)
        self.time = 0
        self.debug = debug

    def log(self, msg):
        if self.debug:
            print(f"[t={self.time}] {msg}")

    @property
    def finished(self):
        return self.stats.completed >= self.config.max_completions

    def tick(self):
        """
        Advance the simulation by one tick.

        Returns:
            False if the completion target has been reached (the tick is cut short
            right after the stats trace that reached it), True otherwise.
        """
        if self.finished:
            return False

        self.stats.trace(self)
        if self.finished:
            self.log(f"Reached {self.stats.completed} completed jobs, stopping")
            return False

        self.admission.step(self)
        self.scheduler.execute(self)
        self.scheduler.try_schedule(self)
        self.time += 1
        return True

    def run(self, max_ticks=None, on_tick=None):
        """
        Run until the completion target is reached or max_ticks ticks have elapsed.

        Args:
            max_ticks: Optional cap on the number of ticks for this call
            on_tick: Optional callback(sim) invoked after every completed tick,
                     used by drivers for pacing

        Returns:
            Summary dict from the stats recorder
        """
        ticks = 0
        while max_ticks is None or ticks < max_ticks:
            if not self.tick():
                break
            ticks += 1
            if on_tick is not None:
                on_tick(self)
        return self.stats.summary(self)
