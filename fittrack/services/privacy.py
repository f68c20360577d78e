"""Privacy manager: consents, legal basis, anonymization and data-subject requests."""

from __future__ import annotations

import hashlib
import logging
import uuid
from datetime import datetime, timedelta
from functools import lru_cache
from typing import Any

from pydantic import ValidationError
from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from fittrack.core.config import get_settings
from fittrack.core.dates import ensure_utc, is_valid_timezone, utcnow
from fittrack.core.enums import (
    ConsentType,
    DataCategory,
    DataRequestStatus,
    DataRequestType,
    ProcessingPurpose,
)
from fittrack.models.analytics_event import AnalyticsEvent
from fittrack.models.audit import AuditLog
from fittrack.models.body import BodyMeasurement
from fittrack.models.goal import Goal
from fittrack.models.privacy import ConsentRecord, DataRequest
from fittrack.models.program import Program
from fittrack.models.record import PersonalRecord
from fittrack.models.schedule import ScheduledWorkout
from fittrack.models.user import User
from fittrack.models.workout import WorkoutSession
from fittrack.schemas.user import UserUpdate
from fittrack.services.audit import purge_audit_logs
from fittrack.services.user_data import export_user_data, portable_user_data
from fittrack.services.validation import sanitize_text

logger = logging.getLogger(__name__)

LEGAL_BASIS: dict[ProcessingPurpose, str] = {
    ProcessingPurpose.SERVICE_PROVISION: "contract",
    ProcessingPurpose.ANALYTICS: "consent",
    ProcessingPurpose.MARKETING: "consent",
    ProcessingPurpose.SECURITY: "legitimate_interest",
    ProcessingPurpose.COMPLIANCE: "legal_obligation",
    ProcessingPurpose.RESEARCH: "consent",
}

ANONYMIZED_DOMAIN = "@anonymized.local"
ANONYMOUS_NAME = "Anonymous User"
PHONE_VISIBLE_CHARS = 2
RECTIFIABLE_FIELDS = ("display_name", "phone", "timezone")


class PrivacyError(Exception):
    """A privacy request that cannot be carried out."""


def _sha256(value: str) -> str:
    return hashlib.sha256(value.encode()).hexdigest()


def legal_basis(purpose: ProcessingPurpose | str) -> str:
    return LEGAL_BASIS[ProcessingPurpose(purpose)]


def mask_phone(phone: str, visible: int = PHONE_VISIBLE_CHARS) -> str:
    if len(phone) <= visible:
        return "*" * len(phone)
    return "*" * (len(phone) - visible) + phone[-visible:]


def pseudonymize(user_id: uuid.UUID | str) -> str:
    return "user_" + _sha256(f"{user_id}pseudonym_salt")[:8]


class PrivacyManager:
    def __init__(self, consent_expiry_days: int, retention_days: int, deletion_grace_days: int, salt: str) -> None:
        self.consent_expiry_days = consent_expiry_days
        self.retention_days = retention_days
        self.deletion_grace_days = deletion_grace_days
        self._salt = salt

    # Anonymization

    def anonymize_field(self, field: str, value: Any) -> Any:
        if value is None or not isinstance(value, str):
            return value
        if field == "email":
            return _sha256(value + self._salt)[:16] + ANONYMIZED_DOMAIN
        if field in ("name", "display_name"):
            return ANONYMOUS_NAME
        if field == "phone":
            return mask_phone(value)
        if field == "address":
            return value.split(",")[-1].strip()
        if field == "ip_address":
            return _sha256(value)
        return value

    def anonymize(self, record: dict[str, Any]) -> dict[str, Any]:
        return {field: self.anonymize_field(field, value) for field, value in record.items()}

    # Consents

    async def record_consent(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        consent_type: ConsentType,
        granted: bool,
        version: str = "1.0",
        now: datetime | None = None,
    ) -> ConsentRecord:
        now = now or utcnow()
        record = ConsentRecord(
            user_id=user_id,
            consent_type=consent_type,
            granted=granted,
            version=version,
            recorded_at=now,
            expires_at=now + timedelta(days=self.consent_expiry_days) if granted else None,
        )
        db.add(record)
        await db.flush()
        logger.info("Consent %s=%s recorded for user %s", consent_type.value, granted, user_id)
        return record

    async def latest_consents(self, db: AsyncSession, user_id: uuid.UUID) -> dict[ConsentType, ConsentRecord]:
        result = await db.execute(
            select(ConsentRecord)
            .where(ConsentRecord.user_id == user_id)
            .order_by(ConsentRecord.recorded_at, ConsentRecord.id)
        )
        latest: dict[ConsentType, ConsentRecord] = {}
        for record in result.scalars().all():
            latest[record.consent_type] = record
        return latest

    def is_active(self, record: ConsentRecord | None, now: datetime) -> bool:
        if record is None or not record.granted or record.withdrawn_at is not None or record.expired:
            return False
        return record.expires_at is None or ensure_utc(record.expires_at) > now

    async def has_consent(
        self, db: AsyncSession, user_id: uuid.UUID, consent_type: ConsentType, now: datetime | None = None
    ) -> bool:
        if consent_type == ConsentType.ESSENTIAL:
            return True
        latest = await self.latest_consents(db, user_id)
        return self.is_active(latest.get(consent_type), now or utcnow())

    async def withdraw_consent(
        self, db: AsyncSession, user_id: uuid.UUID, consent_type: ConsentType, now: datetime | None = None
    ) -> int:
        result = await db.execute(
            update(ConsentRecord)
            .where(
                ConsentRecord.user_id == user_id,
                ConsentRecord.consent_type == consent_type,
                ConsentRecord.granted.is_(True),
                ConsentRecord.withdrawn_at.is_(None),
            )
            .values(withdrawn_at=now or utcnow())
            .execution_options(synchronize_session="fetch")
        )
        count = result.rowcount or 0
        logger.info("Consent %s withdrawn for user %s (%d records)", consent_type.value, user_id, count)
        return count

    # Data-subject requests

    async def create_request(
        self,
        db: AsyncSession,
        user: User,
        request_type: str,
        payload: dict[str, Any] | None = None,
        now: datetime | None = None,
    ) -> DataRequest:
        try:
            kind = DataRequestType(request_type)
        except ValueError:
            raise PrivacyError(f"Unsupported request type: {request_type}") from None
        now = now or utcnow()
        payload = payload or {}
        request = DataRequest(user_id=user.id, request_type=kind, payload=payload, created_at=now)

        if kind == DataRequestType.EXPORT:
            request.result = await export_user_data(db, user)
            request.status = DataRequestStatus.COMPLETED
            request.completed_at = now
        elif kind == DataRequestType.PORTABILITY:
            request.result = await portable_user_data(db, user)
            request.status = DataRequestStatus.COMPLETED
            request.completed_at = now
        elif kind == DataRequestType.DELETE:
            request.status = DataRequestStatus.SCHEDULED
            request.scheduled_for = now + timedelta(days=self.deletion_grace_days)
        elif kind == DataRequestType.RECTIFY:
            changes = {k: v for k, v in payload.items() if k in RECTIFIABLE_FIELDS}
            if not changes:
                raise PrivacyError(f"Nothing to rectify; allowed fields: {', '.join(RECTIFIABLE_FIELDS)}")
            try:
                changes = UserUpdate.model_validate(changes).model_dump(include=set(changes))
            except ValidationError as e:
                raise PrivacyError(f"Invalid rectification: {e.errors()[0]['msg']}") from None
            for field in ("display_name", "phone"):
                if field in changes:
                    changes[field] = sanitize_text(changes[field])
            if "timezone" in changes and not (changes["timezone"] and is_valid_timezone(changes["timezone"])):
                raise PrivacyError(f"Unknown timezone: {changes['timezone']}")
            for field, value in changes.items():
                setattr(user, field, value)
            request.result = {"updated": sorted(changes)}
            request.status = DataRequestStatus.COMPLETED
            request.completed_at = now

        db.add(request)
        await db.flush()
        logger.info("Data request %s (%s) for user %s", kind.value, request.status.value, user.id)
        return request

    async def cancel_request(self, db: AsyncSession, request: DataRequest) -> DataRequest:
        if request.status != DataRequestStatus.SCHEDULED:
            raise PrivacyError("Only scheduled requests can be cancelled")
        request.status = DataRequestStatus.CANCELLED
        await db.flush()
        logger.info("Data request %s cancelled", request.id)
        return request

    async def _delete_user(self, db: AsyncSession, user_id: uuid.UUID) -> None:
        pseudonym = pseudonymize(user_id)
        logs = await db.execute(select(AuditLog).where(AuditLog.user_id == user_id))
        for log in logs.scalars().all():
            log.details = {**(log.details or {}), "pseudonym": pseudonym}
            log.user_id = None
        await db.flush()
        user = await db.get(User, user_id)
        if user is not None:
            await db.delete(user)
            await db.flush()
        logger.info("Deleted account %s", pseudonym)

    async def cleanup_expired_data(self, db: AsyncSession, now: datetime | None = None) -> dict[str, int]:
        """Run due deletions, expire consents, purge old audit logs and analytics events."""
        now = now or utcnow()
        due = await db.execute(
            select(DataRequest).where(
                DataRequest.request_type == DataRequestType.DELETE,
                DataRequest.status == DataRequestStatus.SCHEDULED,
                DataRequest.scheduled_for <= now,
            )
        )
        deleted_users = 0
        for request in due.scalars().all():
            user_id = request.user_id
            request.status = DataRequestStatus.COMPLETED
            request.completed_at = now
            await db.flush()
            await self._delete_user(db, user_id)
            deleted_users += 1

        expired = await db.execute(
            update(ConsentRecord)
            .where(ConsentRecord.expired.is_(False), ConsentRecord.expires_at < now)
            .values(expired=True)
            .execution_options(synchronize_session="fetch")
        )
        events = await db.execute(
            delete(AnalyticsEvent).where(AnalyticsEvent.occurred_at < now - timedelta(days=self.retention_days))
        )
        purged_logs = await purge_audit_logs(db, now)
        summary = {
            "deleted_users": deleted_users,
            "expired_consents": expired.rowcount or 0,
            "purged_audit_logs": purged_logs,
            "purged_analytics_events": events.rowcount or 0,
        }
        logger.info("Privacy cleanup: %s", summary)
        return summary

    # Reporting

    async def get_privacy_status(self, db: AsyncSession, now: datetime | None = None) -> dict[str, Any]:
        now = now or utcnow()
        rows = await db.execute(
            select(ConsentRecord.consent_type, func.count(ConsentRecord.id))
            .where(
                ConsentRecord.granted.is_(True),
                ConsentRecord.withdrawn_at.is_(None),
                ConsentRecord.expired.is_(False),
                ConsentRecord.expires_at > now,
            )
            .group_by(ConsentRecord.consent_type)
        )
        granted = {ct.value: 0 for ct in ConsentType}
        for consent_type, count in rows.all():
            granted[consent_type.value] = count
        pending = await db.execute(
            select(func.count(DataRequest.id)).where(
                DataRequest.status.in_([DataRequestStatus.PENDING, DataRequestStatus.SCHEDULED])
            )
        )
        return {
            "consents_granted": granted,
            "pending_requests": pending.scalar_one(),
            "legal_basis": {p.value: basis for p, basis in LEGAL_BASIS.items()},
            "consent_expiry_days": self.consent_expiry_days,
            "data_retention_days": self.retention_days,
            "deletion_grace_days": self.deletion_grace_days,
        }

    async def _count(self, db: AsyncSession, model, user_id: uuid.UUID) -> int:
        result = await db.execute(select(func.count()).select_from(model).where(model.user_id == user_id))
        return result.scalar_one()

    async def get_user_privacy_summary(self, db: AsyncSession, user: User, now: datetime | None = None) -> dict:
        now = now or utcnow()
        latest = await self.latest_consents(db, user.id)
        requests = await db.execute(
            select(DataRequest).where(DataRequest.user_id == user.id).order_by(DataRequest.created_at.desc())
        )
        sessions = await self._count(db, WorkoutSession, user.id)
        programs = await self._count(db, Program, user.id)
        schedule = await self._count(db, ScheduledWorkout, user.id)
        records = await self._count(db, PersonalRecord, user.id)
        goals = await self._count(db, Goal, user.id)
        body = await self._count(db, BodyMeasurement, user.id)
        events = await self._count(db, AnalyticsEvent, user.id)
        logs = await self._count(db, AuditLog, user.id)
        return {
            "consents": {
                ct.value: ct == ConsentType.ESSENTIAL or self.is_active(latest.get(ct), now) for ct in ConsentType
            },
            "requests": [
                {
                    "id": r.id,
                    "request_type": r.request_type.value,
                    "status": r.status.value,
                    "created_at": r.created_at,
                    "scheduled_for": r.scheduled_for,
                }
                for r in requests.scalars().all()
            ],
            "data_counts": {
                DataCategory.PERSONAL.value: 1,
                DataCategory.SENSITIVE.value: body,
                DataCategory.BEHAVIORAL.value: sessions + programs + schedule + records + goals,
                DataCategory.TECHNICAL.value: logs,
                DataCategory.ANALYTICS.value: events,
            },
        }


@lru_cache
def get_privacy_manager() -> PrivacyManager:
    settings = get_settings()
    return PrivacyManager(
        consent_expiry_days=settings.consent_expiry_days,
        retention_days=settings.data_retention_days,
        deletion_grace_days=settings.deletion_grace_days,
        salt=settings.encryption_secret,
    )
