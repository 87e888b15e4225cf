import threading
import weakref
from contextlib import contextmanager
from typing import Iterable

from sqlalchemy.orm import Session

from ..models.leasing_tenants.leases import Lease

_registry_lock = threading.Lock()
# entries vanish once no guard holds the lock
_lease_locks = weakref.WeakValueDictionary()


def _lock_for(lease_id: int) -> threading.RLock:
    with _registry_lock:
        lock = _lease_locks.get(lease_id)
        if lock is None:
            lock = _lease_locks[lease_id] = threading.RLock()
        return lock


@contextmanager
def lease_guard(db: Session, lease_ids: Iterable[int]):
    """
    Serialize writers on the given leases.

    Locks are always taken in ascending lease id order, both the
    in-process ones and the row locks, so two multi-lease writers cannot
    deadlock. Yields {lease_id: Lease} read fresh under the lock.
    """
    ordered = sorted(set(lease_ids))
    acquired = []
    try:
        for lease_id in ordered:
            lock = _lock_for(lease_id)
            lock.acquire()
            acquired.append(lock)

        leases = (
            db.query(Lease)
            .filter(Lease.id.in_(ordered))
            .order_by(Lease.id)
            .with_for_update()
            .populate_existing()
            .all()
        )
        yield {lease.id: lease for lease in leases}
    finally:
        for lock in reversed(acquired):
            lock.release()
