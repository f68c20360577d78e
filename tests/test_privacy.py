import hashlib
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from fittrack.core.enums import ProcessingPurpose
from fittrack.services.privacy import PrivacyManager, legal_basis, mask_phone, pseudonymize

NOW = datetime(2026, 3, 1, tzinfo=timezone.utc)


@pytest.fixture
def manager():
    return PrivacyManager(consent_expiry_days=365, retention_days=730, deletion_grace_days=30, salt="pepper")


def test_email_is_hashed_into_anonymized_domain(manager):
    anonymized = manager.anonymize_field("email", "sam@example.com")
    assert anonymized == hashlib.sha256(b"sam@example.compepper").hexdigest()[:16] + "@anonymized.local"


def test_anonymize_record(manager):
    record = {
        "display_name": "Sam Lee",
        "phone": "+15551234567",
        "address": "1 Main St, Springfield, USA",
        "ip_address": "10.0.0.1",
        "weight": 80,
        "notes": None,
    }
    result = manager.anonymize(record)
    assert result["display_name"] == "Anonymous User"
    assert result["phone"] == "**********67"
    assert result["address"] == "USA"
    assert result["ip_address"] == hashlib.sha256(b"10.0.0.1").hexdigest()
    assert result["weight"] == 80
    assert result["notes"] is None


def test_mask_short_phone():
    assert mask_phone("12") == "**"
    assert mask_phone("12345") == "***45"


def test_pseudonym_is_stable():
    assert pseudonymize("abc") == "user_" + hashlib.sha256(b"abcpseudonym_salt").hexdigest()[:8]
    assert pseudonymize("abc") == pseudonymize("abc")
    assert pseudonymize("abc") != pseudonymize("abd")


def test_legal_basis():
    assert legal_basis(ProcessingPurpose.SERVICE_PROVISION) == "contract"
    assert legal_basis("security") == "legitimate_interest"
    assert legal_basis("compliance") == "legal_obligation"


def consent(**overrides):
    fields = {"granted": True, "withdrawn_at": None, "expired": False, "expires_at": NOW + timedelta(days=1)}
    fields.update(overrides)
    return SimpleNamespace(**fields)


def test_consent_activity(manager):
    assert manager.is_active(consent(), NOW)
    assert not manager.is_active(None, NOW)
    assert not manager.is_active(consent(granted=False), NOW)
    assert not manager.is_active(consent(withdrawn_at=NOW), NOW)
    assert not manager.is_active(consent(expired=True), NOW)
    assert not manager.is_active(consent(expires_at=NOW - timedelta(seconds=1)), NOW)
    # Stored naive by SQLite
    assert manager.is_active(consent(expires_at=datetime(2026, 3, 2)), NOW)
