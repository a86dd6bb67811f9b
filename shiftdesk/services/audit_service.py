"""
Audit logging service
"""
from sqlalchemy.orm import Session
from shiftdesk.models.audit_log import AuditLog
from shiftdesk.utils.datetime_utils import now_utc
from shiftdesk.utils.json_serializer import sanitize_for_json
from typing import Optional, Dict, Any


def log_audit(
    db: Session,
    actor_id: Optional[int],
    action: str,
    entity_type: str,
    entity_id: Optional[int] = None,
    meta: Optional[Dict[str, Any]] = None
) -> AuditLog:
    """
    Create an audit log entry

    Args:
        db: Database session
        actor_id: ID of the user performing the action (None for system jobs)
        action: Action type (e.g., "CREATE", "UPDATE", "ATTENDANCE_MARK")
        entity_type: Table of the affected entity (e.g., "shifts", "leave_requests")
        entity_id: ID of the affected entity (optional)
        meta: Additional metadata as dictionary (optional)

    Returns:
        Created AuditLog instance
    """
    safe_meta = sanitize_for_json(meta) if meta is not None else None

    # created_at set explicitly; SQLite server defaults drop the timezone
    audit_log = AuditLog(
        actor_id=actor_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        meta_json=safe_meta,
        created_at=now_utc()
    )
    db.add(audit_log)
    db.commit()
    db.refresh(audit_log)
    return audit_log
