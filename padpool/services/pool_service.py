"""Service layer for pool use cases.

- Routers and the CLI should not touch the store directly; they call this module.
- This layer owns the mode-aware mapping from a key's date to a stored pool.
- Encoding and decoding themselves stay in the pure codec.
"""

import logging
from datetime import date
from pathlib import Path
from typing import Callable, Tuple

from padpool.clock import utc_today
from padpool.config import ServerConfig
from padpool.converter import KeyFileConverter
from padpool.domain import codec
from padpool.domain.pool_rules import current_identifier, date_identifier, resolve_identifier
from padpool.domain.validity import describe_validity
from padpool.errors import PoolNotFoundError
from padpool.models.dc_models import ConfigModel, KeyFileModel
from padpool.pool import RandomPool
from padpool.pool_store import PoolStore


class PoolService:
    def __init__(
        self,
        config: ServerConfig,
        store: PoolStore,
        today: Callable[[], date] = utc_today,
    ):
        self.config = config
        self.store = store
        self.today = today
        self.converter = KeyFileConverter()

    def public_config(self) -> ConfigModel:
        return self.config.public_view()

    def identifier_for(self, requested_date: str) -> str:
        """Map a requested date to the identifier of the pool that serves it

        Raises:
            PoolNotFoundError: The date is malformed in daily mode
        """
        identifier = resolve_identifier(self.config.server_data_mode, requested_date)
        if identifier is None:
            raise PoolNotFoundError(requested_date)
        return identifier

    def pool_file(self, requested_date: str) -> Path:
        """Return the file holding the pool for requested_date

        Raises:
            PoolNotFoundError: The pool was evicted, never created, or its file is damaged
        """
        identifier = self.identifier_for(requested_date)
        if not self.store.is_complete(identifier):
            raise PoolNotFoundError(identifier)
        return self.store.pool_path(identifier)

    def load_pool(self, requested_date: str) -> RandomPool:
        return self.store.load(self.identifier_for(requested_date))

    def encode_file(self, file_name: str, data: bytes) -> KeyFileModel:
        """Encode a file against the current pool

        Args:
            file_name (str): Original file name, its extension is kept in the key
            data (bytes): File contents

        Raises:
            PoolNotFoundError: The current pool does not exist
            EncodeError: The pool lacks one of the byte values

        Returns:
            KeyFileModel: The key, dated with today's UTC date in every mode
        """
        today = self.today()
        pool = self.store.load(current_identifier(self.config.server_data_mode, today))
        positions = codec.encode(pool, data)
        key = self.converter.build_key(date_identifier(today), file_name, positions)
        logging.info(f"Encoded {len(data)} bytes against pool '{pool.identifier}'.")
        return key

    def decode_key(self, key: KeyFileModel) -> Tuple[str, bytes]:
        """Reconstruct the file described by a key

        Args:
            key (KeyFileModel): Key produced by encode_file

        Raises:
            PoolNotFoundError: The key's pool expired or never existed
            DecodeError: The key holds a position outside the pool

        Returns:
            Tuple[str, bytes]: Name for the reconstructed file and its contents
        """
        pool = self.load_pool(key.date)
        data = codec.decode(pool, key.positions)
        logging.info(f"Reconstructed {len(data)} bytes from pool '{pool.identifier}'.")
        return self.converter.reconstructed_file_name(key.file_extension), data

    def validity(self, pool_date: str) -> str:
        return describe_validity(self.config.server_data_mode, self.config.days_to_keep, pool_date)
