from contextlib import contextmanager
from threading import Lock
from typing import Dict, Iterator


class PoolLockManager:
    def __init__(self):
        self.locks: Dict[str, Lock] = {}  # one lock per pool identifier
        self.lock = Lock()  # protects access to locks

    def get_lock(self, identifier: str) -> Lock:
        """Get the Lock of the specified identifier

        Args:
            identifier (str): Pool identifier

        Returns:
            Lock: Lock guarding create/delete of this pool
        """
        with self.lock:
            if identifier not in self.locks:
                self.locks[identifier] = Lock()
            return self.locks[identifier]

    @contextmanager
    def hold(self, identifier: str) -> Iterator[None]:
        """Hold the lock of the specified identifier for the duration of the block

        Args:
            identifier (str): Pool identifier
        """
        lock = self.get_lock(identifier)
        with lock:
            yield

