"""
Synthetic workload: admission and departure of jobs and resources.

Each tick the admission controller:
- Seeds the initial resource pool on its first call
- Purges finished jobs and departed resources
- Draws one integer in 1..1000 and creates at most one new resource or job

Resource levels, job workloads and transfer times are uniform draws from the
configured inclusive ranges. The random source is injected so runs are
reproducible under a fixed seed and tests can script individual draws.
"""
import numpy as np


def make_rng(seed=None):
    """Seedable random source shared by admission and the schedulers."""
    return np.random.default_rng(seed)


def draw(rng, low, high):
    """Uniform integer in the inclusive range [low, high]."""
    return int(rng.integers(low, high + 1))


def chance(rng, per_mille):
    """True with probability per_mille / 1000."""
    return draw(rng, 0, 999) < per_mille


class Admission:
    def __init__(self, config):
        self.config = config
        self.seeded = False

    def step(self, sim):
        if not self.seeded:
            for _ in range(self.config.initial_resources):
                self.add_resource(sim)
            self.seeded = True

        jobs_gone, resources_gone = sim.cluster.purge()
        if jobs_gone or resources_gone:
            sim.log(f"Purged {jobs_gone} done jobs, {resources_gone} leaving resources")

        # One draw decides both creations; the resource range takes precedence
        # if the two ranges overlap.
        i = draw(sim.rng, 1, 1000)
        if i <= self.config.p_add_resource:
            self.add_resource(sim)
        elif i > 1000 - self.config.p_add_job:
            self.add_job(sim)

    def add_resource(self, sim):
        try:
            level = draw(sim.rng, *self.config.resource_level_range)
            resource = sim.cluster.add_resource(level)
        except MemoryError:
            sim.log("Out of memory, resource creation skipped")
            return None
        sim.log(f"Resource {resource.rid} JOINED (level={resource.level})")
        return resource

    def add_job(self, sim):
        try:
            workload = draw(sim.rng, *self.config.job_workload_range)
            transfer = draw(sim.rng, *self.config.job_transfer_range)
            job = sim.cluster.add_job(workload, transfer)
        except MemoryError:
            sim.log("Out of memory, job submission skipped")
            return None
        sim.log(f"Job {job.jid} SUBMITTED (workload={job.workload}, transfer={job.transfer_remaining})")
        return job
