import pytest

from fittrack.core.encryption import DecryptionError, EncryptionManager
from fittrack.core.enums import Sensitivity


@pytest.fixture
def manager():
    return EncryptionManager("unit-test-master-secret", iterations=1000)


def test_round_trip(manager):
    envelope = manager.encrypt({"weight": 82.5, "notes": "cut"}, Sensitivity.RESTRICTED)
    assert envelope["encrypted"] is True
    assert envelope["sensitivity"] == "restricted"
    assert "82.5" not in envelope["data"]
    assert manager.decrypt(envelope) == {"weight": 82.5, "notes": "cut"}


def test_public_values_are_not_encrypted(manager):
    envelope = manager.encrypt("hello", Sensitivity.PUBLIC)
    assert envelope["encrypted"] is False
    assert manager.decrypt(envelope) == "hello"


def test_tampered_envelope_fails(manager):
    envelope = manager.encrypt("secret")
    data = envelope["data"]
    envelope["data"] = data[:20] + ("B" if data[20] == "A" else "A") + data[21:]
    with pytest.raises(DecryptionError):
        manager.decrypt(envelope)


def test_malformed_envelope_fails(manager):
    with pytest.raises(DecryptionError):
        manager.decrypt({"nope": True})


def test_rotation_keeps_old_envelopes_readable(manager):
    old = manager.encrypt("before rotation")
    assert manager.rotate_keys() == 2
    new = manager.encrypt("after rotation")
    assert new["key_version"] == 2
    assert manager.decrypt(old) == "before rotation"
    assert manager.decrypt(new) == "after rotation"


def test_field_encryption(manager):
    record = {"email": "a@b.c", "display_name": "Sam", "phone": None}
    encrypted = manager.encrypt_fields(record, {"email": Sensitivity.CONFIDENTIAL, "phone": Sensitivity.RESTRICTED})
    assert encrypted["display_name"] == "Sam"
    assert encrypted["phone"] is None
    assert encrypted["email"]["encrypted"] is True
    assert manager.decrypt_fields(encrypted) == record


def test_hmac(manager):
    signature = manager.generate_hmac("payload")
    assert manager.verify_hmac("payload", signature)
    assert not manager.verify_hmac("payload2", signature)


def test_key_strength():
    weak = EncryptionManager.validate_key_strength("abc")
    assert weak["strength"] == "weak"
    strong = EncryptionManager.validate_key_strength("A" * 16 + "b" * 16 + "1!")
    assert strong == {"score": 100, "strength": "strong", "feedback": []}
