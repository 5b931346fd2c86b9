import random

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def taichi_cpu():
    ti.init(arch=ti.cpu, random_seed=0)
    yield


class FixedRandom:
    """按顺序返回预设的整数，用于确定雨滴落点"""

    def __init__(self, values, chance=0.0):
        self.values = list(values)
        self.chance = chance

    def randrange(self, n):
        return self.values.pop(0) % n

    def random(self):
        return self.chance


@pytest.fixture
def fixed_random():
    return FixedRandom


@pytest.fixture
def seeded_random():
    return random.Random(1234)
