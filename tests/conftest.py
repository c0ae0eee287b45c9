# tests/conftest.py
import pytest


class ScriptedRandom:
    """RandomSource that replays a fixed list of samples, then repeats the last one."""

    def __init__(self, *samples: float):
        self.samples = list(samples)
        self.calls = 0

    def random(self) -> float:
        i = min(self.calls, len(self.samples) - 1)
        self.calls += 1
        return self.samples[i]


@pytest.fixture
def scripted():
    return ScriptedRandom
