from contextlib import contextmanager
from threading import Lock
from weakref import WeakValueDictionary


class _ElectionLock:
    __slots__ = ("lock", "__weakref__")

    def __init__(self):
        self.lock = Lock()


class ElectionLocks:
    """One mutation lock per election.

    The registry lock only guards the lookup, so work on different elections
    never waits on each other. Entries are weakly held: a lock lives only while
    some caller holds or waits on it, so unknown ids leave nothing behind.
    """

    def __init__(self):
        self._registry_lock = Lock()
        self._locks = WeakValueDictionary()

    def __len__(self):
        return len(self._locks)

    def _lock_for(self, election_id):
        with self._registry_lock:
            entry = self._locks.get(election_id)
            if entry is None:
                entry = self._locks[election_id] = _ElectionLock()
            return entry

    @contextmanager
    def hold(self, election_id):
        entry = self._lock_for(election_id)
        with entry.lock:
            yield
