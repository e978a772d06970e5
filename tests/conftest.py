import logging

import pytest


@pytest.fixture
def logger() -> logging.Logger:
    return logging.getLogger("uniform_worldgen.tests")


@pytest.fixture
def small_world_config() -> dict:
    return {
        "seed": 42,
        "world_width_chunks": 12,
        "world_height_chunks": 9,
        "sea_level_fraction": 0.25,
    }
