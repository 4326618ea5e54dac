"""Shared pytest fixtures for pipewave tests."""

import random

import pytest

from pipewave.grid import Grid


class RecordingRandom(random.Random):
    """Random source that records the size of every sequence passed to `choice`."""

    def __init__(self, seed: int) -> None:
        super().__init__(seed)
        self.choice_sizes: list[int] = []

    def choice(self, seq):
        self.choice_sizes.append(len(seq))
        return super().choice(seq)


@pytest.fixture
def rng() -> random.Random:
    """A seeded random source."""
    return random.Random(1234)


@pytest.fixture
def recording_rng() -> RecordingRandom:
    """A seeded random source that records tie-break choices."""
    return RecordingRandom(1234)


@pytest.fixture
def grid3() -> Grid:
    """A fresh 3x3 grid."""
    return Grid(3)
