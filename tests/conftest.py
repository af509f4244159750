"""Shared fixtures for the dice robot test suite.

fixed_rolls replaces utils.rolling.roll so tests can decide every die. Push
values onto fixed_rolls.values before rolling; every call is recorded in
fixed_rolls.calls as (count, faces). When the queue runs dry,
fixed_rolls.default is used if set, otherwise the test fails loudly.
"""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from utils import rolling
from utils.config import ConfigLimits


@pytest.fixture
def limits() -> ConfigLimits:
    return ConfigLimits()


@pytest.fixture
def fixed_rolls(monkeypatch):
    state = SimpleNamespace(values=[], calls=[], default=None)

    def fake_roll(count: int, faces: int) -> list[int]:
        state.calls.append((count, faces))
        results = []
        for _ in range(count):
            if state.values:
                results.append(state.values.pop(0))
            elif state.default is not None:
                results.append(state.default)
            else:
                raise AssertionError(f"unexpected roll of {count}D{faces}")
        return results

    monkeypatch.setattr(rolling, "roll", fake_roll)
    return state
