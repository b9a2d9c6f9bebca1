"""
Pytest configuration and shared fixtures.
"""

import pytest
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fincalc.calculations.interest import InterestMode, Variable


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")


@pytest.fixture
def simple_values():
    """Known values of the default simple interest example."""
    return {Variable.C: 10000, Variable.i: 5, Variable.n: 3}


@pytest.fixture
def compound_values():
    """Known values of the default compound interest example."""
    return {Variable.C: 10000, Variable.i: 8, Variable.n: 2, Variable.m: 12}


@pytest.fixture(params=list(InterestMode))
def mode(request):
    return request.param
