"""
Test Fixtures

Shared test data and mock responses.
"""

from .factories import CandidateFactory, ShowFactory

__all__ = [
    "CandidateFactory",
    "ShowFactory",
]
