"""
Mock implementations for testing.
"""

from tests.mocks.collectors import FailingCollector, MockCollector, SlowCollector

__all__ = [
    "MockCollector",
    "FailingCollector",
    "SlowCollector",
]
