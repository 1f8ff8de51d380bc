"""
Pytest configuration and shared fixtures for simulation tests.
"""
import pytest
from test_utils import create_test_sim, add_test_resource


@pytest.fixture
def ar_sim():
    """AR simulator with an empty, quiet cluster."""
    return create_test_sim("ar")


@pytest.fixture
def mixed_sim():
    """Mixed simulator with an empty, quiet cluster."""
    return create_test_sim("mixed")


@pytest.fixture
def ar_single_resource():
    """AR simulator with one level-1 resource."""
    sim = create_test_sim("ar")
    add_test_resource(sim, level=1)
    return sim


@pytest.fixture
def mixed_single_resource():
    """Mixed simulator with one level-1 resource."""
    sim = create_test_sim("mixed")
    add_test_resource(sim, level=1)
    return sim
