"""
Tests for the cluster entity pools.
"""
from cluster import Cluster, AVAILABLE, BUSY, LEAVING, NOT_ACCEPTING
from jobs import WAITING, RUNNING, DONE


def test_purge_with_nothing_to_remove_is_noop():
    cluster = Cluster()
    resources = [cluster.add_resource(level) for level in (1, 2, 3)]
    jobs = [cluster.add_job(100, 5) for _ in range(3)]
    jobs[1].state = RUNNING

    removed = cluster.purge()

    assert removed == (0, 0)
    assert cluster.resources == resources
    assert cluster.jobs == jobs


def test_purge_removes_done_jobs_and_leaving_resources_in_order():
    cluster = Cluster()
    r1, r2, r3, r4 = [cluster.add_resource(1) for _ in range(4)]
    j1, j2, j3 = [cluster.add_job(100, 0) for _ in range(3)]
    r1.state = LEAVING
    r3.state = LEAVING
    r4.state = NOT_ACCEPTING
    j1.state = DONE
    j3.state = DONE

    removed = cluster.purge()

    assert removed == (2, 2)
    assert cluster.resources == [r2, r4]
    assert cluster.jobs == [j2]


def test_ids_are_never_reused():
    cluster = Cluster()
    first = cluster.add_resource(1)
    first.state = LEAVING
    job = cluster.add_job(100, 0)
    job.state = DONE
    cluster.purge()

    assert cluster.add_resource(1).rid == first.rid + 1
    assert cluster.add_job(100, 0).jid == job.jid + 1
    assert cluster.resource_number == 2
    assert cluster.job_number == 2


def test_resource_handle_resolves_until_resource_leaves():
    cluster = Cluster()
    resource = cluster.add_resource(2)

    assert cluster.resource(resource.rid) is resource
    assert cluster.resource(None) is None

    resource.state = LEAVING
    cluster.purge()
    assert cluster.resource(resource.rid) is None


def test_new_entities_start_idle():
    cluster = Cluster()
    resource = cluster.add_resource(4)
    job = cluster.add_job(300, 12)

    assert resource.state == AVAILABLE
    assert (resource.total_time, resource.used_time, resource.total_workload) == (0, 0, 0)
    assert not resource.reservations
    assert job.state == WAITING
    assert job.wait_time == 0
    assert job.resource_id is None
    assert (job.workload, job.transfer_remaining) == (300, 12)


def test_resource_utilization():
    cluster = Cluster()
    resource = cluster.add_resource(1)
    assert resource.utilization() == 0.0

    resource.total_time = 8
    resource.used_time = 2
    assert resource.utilization() == 25.0


def test_accepting_states():
    cluster = Cluster()
    resource = cluster.add_resource(1)
    for state, accepting in [(AVAILABLE, True), (BUSY, True), (NOT_ACCEPTING, False), (LEAVING, False)]:
        resource.state = state
        assert resource.accepting is accepting


def test_waiting_jobs_in_submission_order():
    cluster = Cluster()
    j1, j2, j3 = [cluster.add_job(100, 0) for _ in range(3)]
    j2.state = RUNNING

    assert cluster.waiting_jobs() == [j1, j3]
