"""
Shared test fixtures for the ppm test suite.
"""

import pytest

from ppm import Engine


@pytest.fixture
def engine():
    """Engine with the predefined commands and no variables."""
    return Engine.with_predefined_commands()


@pytest.fixture
def bare_engine():
    """Engine without any commands, not even the empty (variable) command."""
    return Engine()


@pytest.fixture
def process(engine):
    """Process a template with the predefined engine, returning output and issues.

    Usage:
        def test_something(process):
            output, issues = process("(%lit x%)")
    """
    return engine.process_new
