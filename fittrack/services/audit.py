"""Security audit trail: persist events and purge old ones."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.core.config import get_settings
from fittrack.core.dates import utcnow
from fittrack.core.enums import SecurityEvent
from fittrack.models.audit import AuditLog

logger = logging.getLogger(__name__)

# Events worth a warning in the process log
_WARN_EVENTS = {
    SecurityEvent.LOGIN_FAILED,
    SecurityEvent.ACCOUNT_LOCKED,
    SecurityEvent.PERMISSION_DENIED,
    SecurityEvent.SUSPICIOUS_ACTIVITY,
}


async def log_security_event(
    db: AsyncSession,
    event: SecurityEvent,
    user_id: uuid.UUID | None = None,
    details: dict[str, Any] | None = None,
    ip_address: str | None = None,
) -> AuditLog:
    entry = AuditLog(
        user_id=user_id,
        event_type=event.value,
        details=details or {},
        ip_address=ip_address,
        created_at=utcnow(),
    )
    db.add(entry)
    await db.flush()
    level = logging.WARNING if event in _WARN_EVENTS else logging.INFO
    logger.log(level, "Security event %s user=%s ip=%s", event.value, user_id, ip_address)
    return entry


async def purge_audit_logs(db: AsyncSession, now: datetime | None = None) -> int:
    """Delete audit logs older than the retention period. Returns the number deleted."""
    cutoff = (now or utcnow()) - timedelta(days=get_settings().audit_log_retention_days)
    result = await db.execute(delete(AuditLog).where(AuditLog.created_at < cutoff))
    if result.rowcount:
        logger.info("Purged %d audit logs older than %s", result.rowcount, cutoff.date())
    return result.rowcount or 0
