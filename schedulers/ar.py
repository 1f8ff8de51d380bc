from cluster import AVAILABLE, BUSY, NOT_ACCEPTING, LEAVING
from jobs import WAITING, TRANSFERRING_IN, READY, RUNNING, DONE
from workload import chance
from .base import Scheduler


class AdvanceReservation(Scheduler):
    """
    Advance Reservation (AR) Scheduler.

    Each tick the first waiting job (submission order) is reserved on the accepting
    resource with the least outstanding workload; ties go to the oldest resource.
    Every resource serves its reservation queue strictly in FIFO order: only the
    head job runs, and input data is delivered to one queued job at a time, so the
    next job's transfer overlaps with the current job's execution.

    A resource that decides to leave after a completion stops accepting
    reservations, drains its queue, and then leaves the cluster.
    """

    name = "AR"

    def try_schedule(self, sim):
        job = next((j for j in sim.cluster.jobs if j.state == WAITING), None)
        if job is None:
            return None

        resource = self.least_loaded(sim.cluster.resources)
        if resource is None:
            return None

        # Reserve only once a resource is confirmed, so nothing is left dangling
        resource.reserve(job)
        job.assign(resource)
        resource.state = BUSY
        sim.log(f"Job {job.jid} RESERVED on resource {resource.rid} "
                f"(queue={len(resource.reservations)}, total_workload={resource.total_workload})")
        return job

    @staticmethod
    def least_loaded(resources):
        best = None
        for r in resources:
            if not r.accepting:
                continue
            if best is None or r.total_workload < best.total_workload:
                best = r
        return best

    def execute(self, sim):
        for r in sim.cluster.resources:
            if r.state == NOT_ACCEPTING and not r.reservations:
                r.state = LEAVING
                sim.log(f"Resource {r.rid} LEAVING (queue drained)")
                continue

            rsv = r.head()
            if rsv is None:
                continue

            job = rsv.job
            if job.state == RUNNING:
                self._run_head(sim, r, job)
            elif job.state == READY:
                job.state = RUNNING
                sim.log(f"Job {job.jid} STARTED on resource {r.rid}")

            self._send_data(sim, r)

    def _run_head(self, sim, r, job):
        job.workload -= r.level
        r.total_workload -= r.level
        r.used_time += 1
        if job.workload > 0:
            return

        job.state = DONE
        r.reservations.popleft()
        sim.log(f"Job {job.jid} FINISHED on resource {r.rid} (wait={job.wait_time})")
        if chance(sim.rng, sim.config.p_resource_leave):
            r.state = NOT_ACCEPTING
            sim.log(f"Resource {r.rid} NOT ACCEPTING (queue={len(r.reservations)})")
        elif r.state != NOT_ACCEPTING and not r.reservations:
            r.state = AVAILABLE

    def _send_data(self, sim, r):
        """Advance the single in-flight input transfer of this resource's queue."""
        queue = r.reservations
        for idx, rsv in enumerate(queue):
            job = rsv.job
            if job.state != TRANSFERRING_IN:
                continue
            if not job.sending:
                job.sending = True
                break
            job.transfer_remaining -= 1
            if job.transfer_remaining <= 0:
                job.state = READY
                if idx + 1 < len(queue):
                    queue[idx + 1].job.sending = True
            break
