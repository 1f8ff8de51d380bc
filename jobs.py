"""
Job entity and its lifecycle.

    WAITING -> TRANSFERRING_IN -> (READY ->) RUNNING -> DONE

READY is only used by the advance reservation policy, where a job that has
received its input data still has to wait for the head of its resource queue.
"""

WAITING = "waiting"
TRANSFERRING_IN = "transferring_in"
READY = "ready"
RUNNING = "running"
DONE = "done"


class Job:
    def __init__(self, jid, workload, transfer_time):
        self.jid = jid
        self.state = WAITING
        self.workload = workload  # remaining work units, decremented while running
        self.transfer_remaining = transfer_time
        self.sending = False  # AR: True once this job's own data transfer has begun
        self.wait_time = 0
        self.resource_id = None  # handle into the cluster's resource pool, never owning

    def __repr__(self):
        return (f"Job(jid={self.jid}, state={self.state}, workload={self.workload}, "
                f"transfer={self.transfer_remaining}, wait={self.wait_time})")

    @property
    def is_waiting(self):
        """Counted as waiting by the stats recorder: not yet started and not finished."""
        return self.state not in (RUNNING, DONE)

    def score(self, w_fcfs, w_lwf):
        """
        Mixed-policy priority of a waiting job.

        score = w_fcfs * wait_time + w_lwf * workload

        The first term favours jobs that have waited longest (FCFS), the second
        favours the largest remaining workload (LWF).
        """
        return w_fcfs * self.wait_time + w_lwf * self.workload

    def assign(self, resource):
        self.resource_id = resource.rid
        self.state = TRANSFERRING_IN
        self.sending = False

    def unassign(self):
        self.resource_id = None
        self.state = WAITING
        self.sending = False
