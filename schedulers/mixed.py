from cluster import AVAILABLE, BUSY, RECEIVING_DATA, LEAVING
from jobs import TRANSFERRING_IN, RUNNING, DONE
from workload import chance
from .base import Scheduler


class Mixed(Scheduler):
    """
    Mixed FCFS + Longest-Workload-First Scheduler.

    Each tick the first available resource (oldest first) is matched with the
    waiting job of highest score, w_fcfs * wait_time + w_lwf * workload. Ties keep
    the earliest submitted job. There is no queue: a resource serves exactly one
    job at a time, first receiving its input data, then running it to completion.

    After a completion the resource becomes available again, or leaves the cluster
    with probability p_resource_leave.
    """

    name = "Mixed"

    def __init__(self, w_fcfs=None, w_lwf=None):
        # None means: take the weights from the simulation config
        self.w_fcfs = w_fcfs
        self.w_lwf = w_lwf

    def _weights(self, sim):
        w_fcfs = sim.config.w_fcfs if self.w_fcfs is None else self.w_fcfs
        w_lwf = sim.config.w_lwf if self.w_lwf is None else self.w_lwf
        return w_fcfs, w_lwf

    def try_schedule(self, sim):
        resource = next((r for r in sim.cluster.resources if r.state == AVAILABLE), None)
        if resource is None:
            return None

        job = self.best_job(sim.cluster.waiting_jobs(), *self._weights(sim))
        if job is None:
            return None

        job.assign(resource)
        resource.state = RECEIVING_DATA
        sim.log(f"Job {job.jid} MATCHED with resource {resource.rid} "
                f"(wait={job.wait_time}, workload={job.workload})")
        return job

    @staticmethod
    def best_job(candidates, w_fcfs, w_lwf):
        """Highest scoring candidate; the earliest one wins ties."""
        best, best_score = None, None
        for j in candidates:
            score = j.score(w_fcfs, w_lwf)
            if best is None or score > best_score:
                best, best_score = j, score
        return best

    def execute(self, sim):
        for job in sim.cluster.jobs:
            if job.state not in (TRANSFERRING_IN, RUNNING):
                continue

            r = sim.cluster.resource(job.resource_id)
            if r is None:
                sim.log(f"Job {job.jid} lost resource {job.resource_id}, back to waiting")
                job.unassign()
                continue

            if job.state == TRANSFERRING_IN:
                job.transfer_remaining -= 1
                if job.transfer_remaining <= 0:
                    job.state = RUNNING
                    r.state = BUSY
                    sim.log(f"Job {job.jid} STARTED on resource {r.rid}")
            else:
                job.workload -= r.level
                r.used_time += 1
                if job.workload <= 0:
                    job.state = DONE
                    r.state = AVAILABLE
                    sim.log(f"Job {job.jid} FINISHED on resource {r.rid} (wait={job.wait_time})")
                    if chance(sim.rng, sim.config.p_resource_leave):
                        r.state = LEAVING
                        sim.log(f"Resource {r.rid} LEAVING")
