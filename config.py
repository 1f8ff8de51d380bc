"""
Simulation configuration.

All probabilities are integers out of 1000:
- p_add_resource: chance per tick that a new resource joins the cluster
- p_add_job: chance per tick that a new job is submitted
- p_resource_leave: chance that a resource leaves after completing a job

Both admission probabilities are checked against the same draw, so at most one
entity is created per tick. AR runs with a job-heavy arrival stream (95% of
ticks submit a job), Mixed with a light one (20%).
"""
from dataclasses import dataclass, replace
from typing import Optional

POLICIES = ("ar", "mixed")

# Per-policy overrides applied on top of SimulationConfig defaults
POLICY_DEFAULTS = {
    "ar": {"p_add_job": 950},
    "mixed": {"p_add_job": 200},
}


@dataclass
class SimulationConfig:
    record_interval: int = 500
    max_completions: int = 100000
    resource_level_range: tuple = (1, 5)
    job_workload_range: tuple = (50, 999)
    job_transfer_range: tuple = (0, 29)
    p_add_resource: int = 50
    p_add_job: int = 950
    p_resource_leave: int = 300
    # Mixed policy scoring weights
    w_fcfs: int = 1
    w_lwf: int = 1
    initial_resources: int = 5
    seed: Optional[int] = None

    def validate(self):
        """Raise ValueError if the configuration cannot drive a simulation."""
        if self.record_interval <= 0:
            raise ValueError(f"record_interval must be positive, got {self.record_interval}")
        if self.max_completions <= 0:
            raise ValueError(f"max_completions must be positive, got {self.max_completions}")
        for name in ("resource_level_range", "job_workload_range", "job_transfer_range"):
            low, high = getattr(self, name)
            if low > high:
                raise ValueError(f"{name} is empty: ({low}, {high})")
        if self.resource_level_range[0] < 1:
            raise ValueError("resource levels must be at least 1")
        for name in ("p_add_resource", "p_add_job", "p_resource_leave"):
            value = getattr(self, name)
            if not 0 <= value <= 1000:
                raise ValueError(f"{name} must be in 0..1000, got {value}")
        if self.initial_resources < 0:
            raise ValueError("initial_resources cannot be negative")
        return self


def default_config(policy, **overrides):
    """
    Build the default configuration for a scheduling policy.

    Args:
        policy: "ar" or "mixed"
        **overrides: SimulationConfig fields to replace; None values are ignored
                     so argparse defaults can be passed straight through

    Returns:
        A validated SimulationConfig
    """
    if policy not in POLICY_DEFAULTS:
        raise ValueError(f"Unknown policy {policy!r}, expected one of {POLICIES}")
    config = replace(SimulationConfig(), **POLICY_DEFAULTS[policy])
    overrides = {k: v for k, v in overrides.items() if v is not None}
    return replace(config, **overrides).validate()
