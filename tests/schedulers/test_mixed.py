"""
Tests for the Mixed (FCFS + LWF) scheduler and executor.
"""
from test_utils import *
from cluster import AVAILABLE, BUSY, RECEIVING_DATA, LEAVING
from jobs import WAITING, TRANSFERRING_IN, RUNNING, DONE


def test_mixed_scores_workload_over_wait(mixed_single_resource):
    """(wait, workload) = (0, 900) scores 900 and beats (10, 100) at 110."""
    sim = mixed_single_resource
    heavy = add_test_job(sim, workload=900, wait_time=0)
    old = add_test_job(sim, workload=100, wait_time=10)

    assert sim.scheduler.try_schedule(sim) is heavy
    assert heavy.state == TRANSFERRING_IN
    assert old.state == WAITING


def test_mixed_strictly_greater_score_replaces_first(mixed_single_resource):
    sim = mixed_single_resource
    add_test_job(sim, workload=100, wait_time=10)
    later = add_test_job(sim, workload=900, wait_time=0)

    assert sim.scheduler.try_schedule(sim) is later


def test_mixed_tie_keeps_first_job(mixed_single_resource):
    sim = mixed_single_resource
    first = add_test_job(sim, workload=100, wait_time=50)
    add_test_job(sim, workload=140, wait_time=10)

    assert sim.scheduler.try_schedule(sim) is first, "Equal scores keep the earliest job"


def test_mixed_custom_weights_favour_wait_time():
    sim = create_test_sim("mixed", w_fcfs=10, w_lwf=0)
    add_test_resource(sim)
    add_test_job(sim, workload=900, wait_time=1)
    patient = add_test_job(sim, workload=60, wait_time=40)

    assert sim.scheduler.try_schedule(sim) is patient


def test_mixed_scheduler_weights_override_config():
    sim = create_test_sim("mixed")
    sim.scheduler = Mixed(w_fcfs=1, w_lwf=0)
    add_test_resource(sim)
    add_test_job(sim, workload=900, wait_time=1)
    patient = add_test_job(sim, workload=60, wait_time=2)

    assert sim.scheduler.try_schedule(sim) is patient


def test_mixed_first_available_resource(mixed_sim):
    """Mixed takes the first available resource, not the fastest one."""
    add_test_resource(mixed_sim, level=5, state=BUSY)
    slow = add_test_resource(mixed_sim, level=1)
    add_test_resource(mixed_sim, level=5)
    job = add_test_job(mixed_sim)

    mixed_sim.scheduler.try_schedule(mixed_sim)

    assert job.resource_id == slow.rid
    assert slow.state == RECEIVING_DATA


def test_mixed_no_available_resource(mixed_sim):
    add_test_resource(mixed_sim, state=BUSY)
    job = add_test_job(mixed_sim)

    assert mixed_sim.scheduler.try_schedule(mixed_sim) is None
    assert job.state == WAITING


def test_mixed_no_waiting_job(mixed_single_resource):
    sim = mixed_single_resource
    assert sim.scheduler.try_schedule(sim) is None
    assert sim.cluster.resources[0].state == AVAILABLE


def test_mixed_transfer_then_run_to_completion(mixed_single_resource):
    sim = mixed_single_resource
    resource = sim.cluster.resources[0]
    job = add_test_job(sim, workload=2, transfer=2)
    sim.scheduler.try_schedule(sim)

    sim.scheduler.execute(sim)
    assert job.state == TRANSFERRING_IN and job.transfer_remaining == 1
    assert resource.state == RECEIVING_DATA

    sim.scheduler.execute(sim)
    assert job.state == RUNNING
    assert resource.state == BUSY
    assert resource.used_time == 0, "The transfer tick does not count as usage"

    sim.scheduler.execute(sim)
    assert job.workload == 1
    sim.scheduler.execute(sim)
    assert job.state == DONE
    assert resource.state == AVAILABLE
    assert resource.used_time == 2


def test_mixed_resource_leaves_after_completion():
    sim = create_test_sim("mixed", p_resource_leave=1000)
    resource = add_test_resource(sim, level=5)
    job = add_test_job(sim, workload=5, transfer=0)
    sim.scheduler.try_schedule(sim)

    sim.scheduler.execute(sim)  # transfer done
    sim.scheduler.execute(sim)  # runs and finishes

    assert job.state == DONE
    assert resource.state == LEAVING


def test_mixed_lost_resource_returns_job_to_waiting(mixed_single_resource):
    sim = mixed_single_resource
    resource = sim.cluster.resources[0]
    job = add_test_job(sim, transfer=5)
    sim.scheduler.try_schedule(sim)

    resource.state = LEAVING
    sim.cluster.purge()
    sim.scheduler.execute(sim)

    assert job.state == WAITING
    assert job.resource_id is None


def test_mixed_one_job_bound_per_resource():
    sim = Simulator(create_busy_config("mixed"), Mixed())
    for _ in range(300):
        if not sim.tick():
            break
        bound = [j.resource_id for j in sim.cluster.jobs
                 if j.state in (TRANSFERRING_IN, RUNNING)]
        assert len(bound) == len(set(bound)), "A resource serves one job at a time"
