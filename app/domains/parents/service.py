import copy
import datetime
import logging
import threading
import time
from typing import Dict, Iterable, Optional, Protocol

from app.domains.parents.models import Child, ChildCreate, Identity
from app.shared.phone_utils import mask_phone

logger = logging.getLogger(__name__)


class IdentityStore(Protocol):
    def lookup(self, mobile: str) -> Optional[Identity]:  # pragma: no cover - interface
        ...

    def append_child(self, mobile: str, child: ChildCreate) -> Optional[Identity]:  # pragma: no cover - interface
        ...


class InMemoryIdentityStore:
    def __init__(self, identities: Iterable[Identity] = (), clock=time.time):
        self._identities: Dict[str, Identity] = {i.mobile: i for i in identities}
        self._lock = threading.Lock()
        self._last_dsid = 0
        self.clock = clock

    def __len__(self) -> int:
        with self._lock:
            return len(self._identities)

    def lookup(self, mobile: str) -> Optional[Identity]:
        with self._lock:
            identity = self._identities.get(mobile)
            # Callers get a snapshot; children are only added through append_child.
            return copy.deepcopy(identity) if identity is not None else None

    def _next_dsid(self, now: float) -> str:
        # millisecond timestamp, bumped when two children land in the same millisecond
        millis = max(int(now * 1000), self._last_dsid + 1)
        self._last_dsid = millis
        return f"DSID{millis}"

    def append_child(self, mobile: str, child: ChildCreate) -> Optional[Identity]:
        """Add a child to a parent's record.

        Returns:
            Identity: Snapshot of the updated parent, the new child last. ``None`` if the parent is unknown.
        """
        with self._lock:
            identity = self._identities.get(mobile)
            if identity is None:
                return None

            now = self.clock()
            new_child = Child(
                **child.model_dump(),
                dsid=self._next_dsid(now),
                status="active",
                last_attendance=datetime.date.fromtimestamp(now).isoformat(),
                fee_status="pending",
            )
            identity.children.append(new_child)
            updated = copy.deepcopy(identity)

        logger.info("Child %s added for parent %s", new_child.dsid, mask_phone(mobile))
        return updated
