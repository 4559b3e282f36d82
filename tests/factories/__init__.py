"""Test factories and fakes for host capabilities."""

from tests.factories.http import ORIGIN, FakeFetcher, RecordingSleep, make_response

__all__ = [
    "ORIGIN",
    "FakeFetcher",
    "RecordingSleep",
    "make_response",
]
