"""Tests for the pool service layer."""

import pytest

from padpool.config import ServerConfig
from padpool.domain.pool_rules import SINGLE_POOL_IDENTIFIER
from padpool.errors import DecodeError, PoolNotFoundError
from padpool.models.dc_models import KeyFileModel
from padpool.pool_store import PoolStore
from padpool.services.pool_service import PoolService
from tests.conftest import TODAY


@pytest.fixture
def daily_service(daily_config: ServerConfig, store: PoolStore) -> PoolService:
    store.create("2024-06-01")
    return PoolService(daily_config, store, today=lambda: TODAY)


@pytest.fixture
def single_service(single_config: ServerConfig, store: PoolStore) -> PoolService:
    store.create(SINGLE_POOL_IDENTIFIER)
    return PoolService(single_config, store, today=lambda: TODAY)


class TestDailyMode:
    def test_encode_then_decode(self, daily_service: PoolService) -> None:
        data = bytes(range(256)) + b"padpool"
        key = daily_service.encode_file("notes.txt", data)
        assert key.date == "2024-06-01"
        assert key.file_extension == "txt"
        assert len(key.positions) == len(data)
        assert daily_service.decode_key(key) == ("reconstructed_file.txt", data)

    def test_pool_file_for_unknown_date(self, daily_service: PoolService) -> None:
        with pytest.raises(PoolNotFoundError):
            daily_service.pool_file("2024-05-01")

    def test_malformed_date_is_not_found(self, daily_service: PoolService) -> None:
        with pytest.raises(PoolNotFoundError):
            daily_service.pool_file("../config")

    def test_expired_key(self, daily_service: PoolService, store: PoolStore) -> None:
        key = daily_service.encode_file("a.bin", b"abc")
        store.delete("2024-06-01")
        with pytest.raises(PoolNotFoundError):
            daily_service.decode_key(key)

    def test_out_of_range_key(self, daily_service: PoolService, store: PoolStore) -> None:
        key = KeyFileModel(date="2024-06-01", file_extension="bin", positions=[0, store.pool_size])
        with pytest.raises(DecodeError) as exc_info:
            daily_service.decode_key(key)
        assert exc_info.value.index == 1

    def test_truncated_pool_file_is_not_served(self, daily_service: PoolService, store: PoolStore) -> None:
        store.pool_path("2024-06-01").write_bytes(b"cut short")
        with pytest.raises(PoolNotFoundError):
            daily_service.pool_file("2024-06-01")

    def test_encode_without_current_pool(self, daily_config: ServerConfig, store: PoolStore) -> None:
        service = PoolService(daily_config, store, today=lambda: TODAY)
        with pytest.raises(PoolNotFoundError):
            service.encode_file("a.bin", b"abc")


class TestSingleMode:
    def test_key_is_dated_but_date_is_ignored(self, single_service: PoolService) -> None:
        key = single_service.encode_file("a.bin", b"hello")
        assert key.date == "2024-06-01"
        old_key = key.model_copy(update={"date": "1999-01-01"})
        assert single_service.decode_key(old_key) == ("reconstructed_file.bin", b"hello")

    def test_pool_file_ignores_requested_date(self, single_service: PoolService, store: PoolStore) -> None:
        assert single_service.pool_file("anything") == store.pool_path(SINGLE_POOL_IDENTIFIER)

    def test_validity(self, single_service: PoolService) -> None:
        assert single_service.validity("2024-06-01") == "valid indefinitely (using single server file)"
