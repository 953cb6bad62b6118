import logging
import os
import tempfile
import time
from collections import OrderedDict
from pathlib import Path
from threading import Lock
from typing import List

import numpy as np

from padpool.domain.pool_rules import POOL_SIZE, POOL_SUFFIX, filename_for, identifier_from_filename
from padpool.errors import CreationError, DeleteError, PoolNotFoundError
from padpool.pool import RandomPool
from padpool.pool_lock_manager import PoolLockManager

CACHED_POOLS = 2
TEMPORARY_PREFIX = ".tmp_"
STALE_TEMPORARY_SECONDS = 60 * 60


class PoolStore:
    """Durable storage for random pools, one file per identifier."""

    def __init__(
        self,
        data_dir: Path,
        pool_size: int = POOL_SIZE,
        rng: np.random.Generator | None = None,
        lock_manager: PoolLockManager | None = None,
    ):
        self.data_dir = Path(data_dir)
        self.pool_size = pool_size
        self.rng = rng if rng is not None else np.random.default_rng()
        self.lock_manager = lock_manager if lock_manager is not None else PoolLockManager()
        self._rng_lock = Lock()
        self._cache: "OrderedDict[str, RandomPool]" = OrderedDict()
        self._cache_lock = Lock()

    def ensure_data_dir(self):
        if not self.data_dir.exists():
            self.data_dir.mkdir(parents=True, exist_ok=True)
            logging.info(f"Created directory: {self.data_dir}")

    def pool_path(self, identifier: str) -> Path:
        return self.data_dir / filename_for(identifier)

    def exists(self, identifier: str) -> bool:
        return self.pool_path(identifier).is_file()

    def is_complete(self, identifier: str) -> bool:
        """True if the pool file exists and holds exactly pool_size bytes"""
        try:
            return self.pool_path(identifier).stat().st_size == self.pool_size
        except OSError:
            return False

    def generate(self) -> np.ndarray:
        """Draw pool_size bytes, each uniformly from the full byte range"""
        with self._rng_lock:
            data = self.rng.integers(0, 256, size=self.pool_size, dtype=np.uint8)
        data.setflags(write=False)
        return data

    def create(self, identifier: str) -> RandomPool:
        """Create the pool for identifier unless it already exists

        The bytes are written to a temporary file and hard-linked into place,
        so the pool either fully exists or not at all and an existing pool is
        never overwritten.

        Args:
            identifier (str): Pool identifier

        Raises:
            CreationError: Durable storage is unavailable

        Returns:
            RandomPool: The newly created pool, or the stored one if it already existed
        """
        path = self.pool_path(identifier)
        with self.lock_manager.hold(identifier):
            if path.is_file():
                logging.info(f"Pool file '{path.name}' already exists. No action needed.")
                return self._load_existing(identifier)

            logging.info(f"Attempting to create pool file: {path.name}")
            data = self.generate()
            try:
                self.ensure_data_dir()
                tmp_name = self._write_temporary(data)
            except OSError as e:
                raise CreationError(identifier, str(e)) from e

            try:
                # link() refuses to replace an existing file, unlike rename()
                os.link(tmp_name, path)
            except FileExistsError:
                logging.info(f"Pool file '{path.name}' was created concurrently. Keeping it.")
                return self._load_existing(identifier)
            except OSError as e:
                raise CreationError(identifier, str(e)) from e
            finally:
                os.unlink(tmp_name)

        logging.info(f"{path.name} created successfully.")
        pool = RandomPool(identifier, data)
        self._remember(pool)
        return pool

    def load(self, identifier: str) -> RandomPool:
        """Load a stored pool

        Args:
            identifier (str): Pool identifier

        Raises:
            PoolNotFoundError: No pool is stored under identifier

        Returns:
            RandomPool: The stored pool
        """
        path = self.pool_path(identifier)
        with self._cache_lock:
            pool = self._cache.get(identifier)
            if pool is not None and path.is_file():
                self._cache.move_to_end(identifier)
                return pool

        try:
            data = np.fromfile(path, dtype=np.uint8)
        except FileNotFoundError as e:
            raise PoolNotFoundError(identifier) from e
        if data.size != self.pool_size:
            logging.error(
                f"Pool file '{path.name}' holds {data.size} bytes, expected {self.pool_size}. Ignoring it."
            )
            raise PoolNotFoundError(identifier)
        data.setflags(write=False)

        pool = RandomPool(identifier, data)
        self._remember(pool)
        return pool

    def list(self) -> List[str]:
        """List stored identifiers in ascending order (chronological for dates)"""
        if not self.data_dir.is_dir():
            return []
        identifiers = []
        for entry in os.listdir(self.data_dir):
            identifier = identifier_from_filename(entry)
            if identifier is not None:
                identifiers.append(identifier)
        identifiers.sort()
        return identifiers

    def delete(self, identifier: str):
        """Delete a stored pool. Deleting a missing pool is a no-op.

        Args:
            identifier (str): Pool identifier

        Raises:
            DeleteError: The file exists but could not be removed
        """
        path = self.pool_path(identifier)
        with self.lock_manager.hold(identifier):
            self._forget(identifier)
            try:
                path.unlink()
            except FileNotFoundError:
                logging.info(f"{path.name} already removed.")
                return
            except OSError as e:
                raise DeleteError(identifier, str(e)) from e
        logging.info(f"{path.name} deleted.")

    def remove_stale_temporaries(self, max_age: float = STALE_TEMPORARY_SECONDS) -> List[str]:
        """Remove temporary files left behind by an interrupted create

        Args:
            max_age (float, optional): Files younger than this many seconds may still be in use. Defaults to one hour.

        Returns:
            List[str]: Names of the removed files
        """
        if not self.data_dir.is_dir():
            return []
        cutoff = time.time() - max_age
        removed = []
        for entry in self.data_dir.glob(f"{TEMPORARY_PREFIX}*{POOL_SUFFIX}"):
            try:
                if entry.stat().st_mtime >= cutoff:
                    continue
                entry.unlink()
            except FileNotFoundError:
                continue
            except OSError as e:
                logging.error(f"Error removing temporary file {entry.name}: {e}")
                continue
            logging.info(f"Removed stale temporary file {entry.name}.")
            removed.append(entry.name)
        return removed

    def _load_existing(self, identifier: str) -> RandomPool:
        try:
            return self.load(identifier)
        except PoolNotFoundError as e:
            raise CreationError(identifier, "existing pool file is unreadable or has the wrong size") from e

    def _write_temporary(self, data: np.ndarray) -> str:
        """Write data to a temporary file in the data directory and return its path"""
        with tempfile.NamedTemporaryFile(
            dir=self.data_dir, prefix=TEMPORARY_PREFIX, suffix=POOL_SUFFIX, delete=False
        ) as tmp:
            try:
                tmp.write(data.tobytes())
                tmp.flush()
                os.fsync(tmp.fileno())
            except OSError:
                tmp.close()
                os.unlink(tmp.name)
                raise
        return tmp.name

    def _remember(self, pool: RandomPool):
        with self._cache_lock:
            self._cache[pool.identifier] = pool
            self._cache.move_to_end(pool.identifier)
            while len(self._cache) > CACHED_POOLS:
                self._cache.popitem(last=False)

    def _forget(self, identifier: str):
        with self._cache_lock:
            self._cache.pop(identifier, None)
