"""
Shared test configuration.

Keeps library log output at DEBUG so that caplog sees every diagnostic.
"""

import logging

import pytest


@pytest.fixture(autouse=True)
def _debug_logging(caplog):
    """Capture starlane diagnostics for every test."""
    caplog.set_level(logging.DEBUG, logger="starlane")
    yield
