"""Pytest configuration for showmatch tests."""

from dataclasses import dataclass

import pytest


@dataclass
class Record:
    """Value with a custom rendering, used by end-to-end tests."""
    x: int
    path: str
    vec: list

    def __show__(self, mode, context):
        return f"Object with Int({self.x}), {self.path} and {self.vec}"


EXPECTED_RECORD = "Object with Int(1), /usr/bin/bash and [1.0, 3.1415, 7.5, 1.4142]"


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as unit test"
    )


@pytest.fixture
def record():
    return Record(1, "/usr/bin/bash", [1.0, 3.141592653589793, 7.5, 1.4142135623730951])
