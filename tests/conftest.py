"""Shared pytest fixtures. Object builders live in tests/builders.py."""

import pytest

from builders import make_squad
from data.memory_store import InMemoryDecisionStore, InMemoryReasoningLog
from services.decision_recorder import DecisionRecorder


@pytest.fixture
def squad():
    return make_squad()


@pytest.fixture
def recorder():
    return DecisionRecorder(InMemoryReasoningLog(), InMemoryDecisionStore())
