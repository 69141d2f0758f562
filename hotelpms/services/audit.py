"""Audit logging service."""
from typing import Optional, Dict, Any
from sqlalchemy.orm import Session
import hashlib
import json
from hotelpms.db.models import AuditLog
from hotelpms.core.security import SYSTEM_USER


def _state_hash(state: Optional[Dict[str, Any]]) -> Optional[str]:
    if not state:
        return None
    return hashlib.sha256(
        json.dumps(state, sort_keys=True, default=str).encode()
    ).hexdigest()[:16]


class AuditService:
    """Service for audit logging."""

    def log_action(
        self,
        action: str,
        entity: str,
        entity_id: Optional[str],
        user: Optional[str] = None,
        before_state: Optional[Dict[str, Any]] = None,
        after_state: Optional[Dict[str, Any]] = None,
        metadata: Optional[Dict[str, Any]] = None,
        db: Session = None
    ) -> Optional[AuditLog]:
        """
        Log an action to audit log.

        The entry is added to the session but not committed; it is persisted
        together with the change it describes.

        Args:
            action: Action name (create, cancel, check_in, check_out, pay, ...)
            entity: Entity kind (booking, invoice, maintenance)
            entity_id: Entity ID
            user: User identifier
            before_state: State before action (optional)
            after_state: State after action (optional)
            metadata: Additional metadata (optional)
            db: Database session

        Returns:
            AuditLog entry or None if db not provided
        """
        if not db:
            return None

        audit_entry = AuditLog(
            entity=entity,
            entity_id=entity_id,
            user=user or SYSTEM_USER,
            action=action,
            before_hash=_state_hash(before_state),
            after_hash=_state_hash(after_state),
            metadata_json=metadata or {}
        )

        db.add(audit_entry)
        return audit_entry
