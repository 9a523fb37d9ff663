"""
Change trail for studio entities.

Every create/update/delete made through a service is reported here. Entries
are written to the "audit" logger as one structured line each, and the most
recent ones are kept in memory for inspection. The studio aggregate itself
is not touched: the trail is an operational log, not persisted state.
"""

import json
import logging
from collections import deque
from enum import Enum
from typing import Any

from utils.ids import generate_id
from utils.timezone import now_utc

audit_logger = logging.getLogger("audit")


class AuditAction(Enum):
    """Type of change made to an entity."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


def compute_changes(
    old: dict[str, Any],
    new: dict[str, Any],
    exclude_fields: set[str] | None = None
) -> dict[str, dict[str, Any]]:
    """
    Compute changes between two entity states.

    Args:
        old: Previous state of entity
        new: New state of entity
        exclude_fields: Fields to ignore (defaults to {"created_at"})

    Returns:
        Dict of {field: {"old": old_val, "new": new_val}} for changed fields.
        Empty dict if no changes.
    """
    exclude = exclude_fields or {"created_at"}
    changes = {}

    for key in set(old) | set(new):
        if key in exclude:
            continue

        old_val = old.get(key)
        new_val = new.get(key)

        if old_val != new_val:
            changes[key] = {"old": old_val, "new": new_val}

    return changes


class AuditLogger:
    """
    Audit trail for studio entity changes.

    Pass model_dump(mode="json") output so dates serialize cleanly.

    Usage:
        audit = AuditLogger()

        audit.log_change(
            entity_type="customer",
            entity_id=customer.id,
            action=AuditAction.CREATE,
            changes={"created": data.model_dump(mode="json", exclude_none=True)}
        )

        history = audit.get_entity_history("customer", customer.id)
    """

    def __init__(self, max_entries: int = 1000):
        self._entries: deque[dict[str, Any]] = deque(maxlen=max_entries)

    def log_change(
        self,
        entity_type: str,
        entity_id: str,
        action: AuditAction,
        changes: dict[str, Any],
    ) -> None:
        """
        Log an entity change.

        Changes format by action:
        - CREATE: {"created": {full entity data}}
        - UPDATE: {"field": {"old": old_val, "new": new_val}, ...}
        - DELETE: {"deleted": {full entity data at deletion}}
        """
        entry = {
            "id": generate_id(),
            "entity_type": entity_type,
            "entity_id": entity_id,
            "action": action.value,
            "changes": changes,
            "created_at": now_utc().isoformat(),
        }
        self._entries.append(entry)
        audit_logger.info(json.dumps(entry, ensure_ascii=False, default=str))

    def get_entity_history(self, entity_type: str, entity_id: str) -> list[dict[str, Any]]:
        """
        Recent audit entries for one entity, newest first.

        Only entries still held in memory are returned.
        """
        return [
            e for e in reversed(self._entries)
            if e["entity_type"] == entity_type and e["entity_id"] == entity_id
        ]

    def recent(self, limit: int = 100) -> list[dict[str, Any]]:
        """Latest entries across all entities, newest first."""
        return list(reversed(self._entries))[:limit]
