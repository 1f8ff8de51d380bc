"""
Cluster model: the live pools of resources and jobs.

A cluster holds:
- Resources: servers that join and leave over time, each with a fixed capacity level
- Jobs: submitted work waiting for, transferring to, or running on a resource

Both pools are ordered by creation. Ids are handed out by the cluster and never
reused, so a job can keep a resource id as a weak handle and look it up later;
a lookup after the resource has left simply returns None.
"""
from collections import deque

from jobs import Job, WAITING, DONE

# resource states
AVAILABLE = "available"
BUSY = "busy"
RECEIVING_DATA = "receiving_data"  # Mixed: bound to a job whose input data is in flight
NOT_ACCEPTING = "not_accepting"  # AR: drains its queue, then leaves
LEAVING = "leaving"


class Reservation:
    """Binding of one job to one resource's service queue (AR policy)."""

    __slots__ = ("job",)

    def __init__(self, job):
        self.job = job

    def __repr__(self):
        return f"Reservation(job={self.job.jid})"


class Resource:
    def __init__(self, rid, level):
        self.rid = rid
        self.state = AVAILABLE
        self.level = level  # work units consumed per tick
        self.total_time = 0
        self.used_time = 0
        self.total_workload = 0  # AR: outstanding work in the reservation queue
        self.reservations = deque()

    def __repr__(self):
        return (f"Resource(rid={self.rid}, state={self.state}, level={self.level}, "
                f"used={self.used_time}/{self.total_time}, queued={len(self.reservations)})")

    @property
    def accepting(self):
        return self.state not in (NOT_ACCEPTING, LEAVING)

    def utilization(self):
        """Percentage of this resource's lifetime spent running jobs."""
        if self.total_time <= 0:
            return 0.0
        return self.used_time / self.total_time * 100

    def reserve(self, job):
        rsv = Reservation(job)
        self.reservations.append(rsv)
        self.total_workload += job.workload
        return rsv

    def head(self):
        return self.reservations[0] if self.reservations else None


class Cluster:
    def __init__(self):
        self.resources = []
        self.jobs = []
        self.resource_number = 0  # total resources ever added
        self.job_number = 0  # total jobs ever submitted
        self._by_rid = {}

    def add_resource(self, level):
        self.resource_number += 1
        resource = Resource(self.resource_number, level)
        self.resources.append(resource)
        self._by_rid[resource.rid] = resource
        return resource

    def add_job(self, workload, transfer_time):
        self.job_number += 1
        job = Job(self.job_number, workload, transfer_time)
        self.jobs.append(job)
        return job

    def resource(self, rid):
        """Resolve a resource handle; None if unassigned or the resource has left."""
        if rid is None:
            return None
        return self._by_rid.get(rid)

    def purge(self):
        """
        Drop finished jobs and departed resources in a single pass per pool.

        Order of the remaining entities is preserved. Returns the number of
        (jobs, resources) removed; (0, 0) means the pools are unchanged.
        """
        n_jobs = len(self.jobs)
        n_res = len(self.resources)
        self.jobs = [j for j in self.jobs if j.state != DONE]
        gone = [r for r in self.resources if r.state == LEAVING]
        if gone:
            self.resources = [r for r in self.resources if r.state != LEAVING]
            for r in gone:
                del self._by_rid[r.rid]
        return n_jobs - len(self.jobs), n_res - len(self.resources)

    def waiting_jobs(self):
        return [j for j in self.jobs if j.state == WAITING]
