"""
In-memory entitlement store for the Procurement Listener.
"""

from contextlib import contextmanager
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional
import threading

from shared.logging import get_logger


class EntitlementState(str, Enum):
    """Lifecycle state of a stored entitlement."""
    ACTIVE = "active"


@dataclass(frozen=True)
class EntitlementRecord:
    """What the listener knows about one entitlement.

    Records are never modified once stored; equality compares every field.
    """
    id: str
    state: EntitlementState = EntitlementState.ACTIVE
    service_id: str = ""
    plan_id: str = ""
    account_id: str = ""
    requestor_id: str = ""
    parameters: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["state"] = self.state.value
        return data


class InMemoryEntitlementStore:
    """Entitlement records keyed by entitlement id, held for the process lifetime.

    The store never decides whether a write is legitimate: ``put`` only
    inserts when the id is absent. Callers that read, decide and then write
    hold ``lock(entitlement_id)`` for the whole sequence.
    """

    def __init__(self):
        self.logger = get_logger("procurement.store")
        self._records: Dict[str, EntitlementRecord] = {}
        self._events: Dict[str, List[str]] = {}
        self._lock = threading.RLock()
        self._key_locks: Dict[str, threading.Lock] = {}

    @contextmanager
    def lock(self, entitlement_id: str) -> Iterator[None]:
        """Serialize access to a single entitlement id."""
        with self._lock:
            key_lock = self._key_locks.get(entitlement_id)
            if key_lock is None:
                key_lock = threading.Lock()
                self._key_locks[entitlement_id] = key_lock

        with key_lock:
            yield

    def get(self, entitlement_id: str) -> Optional[EntitlementRecord]:
        """Get a record by entitlement id."""
        with self._lock:
            return self._records.get(entitlement_id)

    def put(self, record: EntitlementRecord) -> bool:
        """Insert ``record`` unless its id is already stored.

        Returns True when the record was inserted.
        """
        with self._lock:
            if record.id in self._records:
                return False
            self._records[record.id] = record

        self.logger.debug("Entitlement stored", entitlement_id=record.id)
        return True

    def record_event(self, entitlement_id: str, event_id: str) -> None:
        """Remember that ``event_id`` was accepted for ``entitlement_id``."""
        with self._lock:
            events = self._events.setdefault(entitlement_id, [])
            if event_id not in events:
                events.append(event_id)

    def events_for(self, entitlement_id: str) -> List[str]:
        """Accepted event ids for an entitlement, oldest first."""
        with self._lock:
            return list(self._events.get(entitlement_id, []))

    def list(self) -> List[EntitlementRecord]:
        """All stored records in insertion order."""
        with self._lock:
            return list(self._records.values())

    def count(self) -> int:
        with self._lock:
            return len(self._records)

    def reset(self):
        """Drop every record. Meant for test harnesses between scenarios."""
        with self._lock:
            self._records.clear()
            self._events.clear()
            self._key_locks.clear()
        self.logger.info("Entitlement store reset")

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, entitlement_id: object) -> bool:
        with self._lock:
            return entitlement_id in self._records
