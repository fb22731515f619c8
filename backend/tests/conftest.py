import random

import pytest


class MaxRandom(random.Random):
    """Random source whose choice() always returns the largest value."""

    def choice(self, seq):
        return max(seq)


@pytest.fixture
def max_rng() -> random.Random:
    return MaxRandom(0)
