from datetime import date
from pathlib import Path

import numpy as np
import pytest

from padpool.config import ServerConfig
from padpool.models.dc_models import ServerDataMode
from padpool.pool_store import PoolStore

# Large enough that a seeded uniform pool holds every byte value.
TEST_POOL_SIZE = 64 * 1024
TODAY = date(2024, 6, 1)


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "server_data"


@pytest.fixture
def daily_config(data_dir: Path) -> ServerConfig:
    return ServerConfig(
        days_to_keep=3,
        server_data_mode=ServerDataMode.daily,
        data_dir=data_dir,
        pool_size=TEST_POOL_SIZE,
    )


@pytest.fixture
def single_config(data_dir: Path) -> ServerConfig:
    return ServerConfig(
        days_to_keep=3,
        server_data_mode=ServerDataMode.single,
        data_dir=data_dir,
        pool_size=TEST_POOL_SIZE,
    )


@pytest.fixture
def store(data_dir: Path) -> PoolStore:
    return PoolStore(data_dir, pool_size=TEST_POOL_SIZE, rng=np.random.default_rng(1234))
