"""Envelope encryption for sensitive values (Fernet with PBKDF2-derived keys)."""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import logging
import os
import re
import secrets
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from fittrack.core.config import get_settings
from fittrack.core.enums import Sensitivity

logger = logging.getLogger(__name__)

ALGORITHM = "fernet-pbkdf2-sha256"
SALT_BYTES = 16
KEY_CACHE_LIMIT = 256
MIN_KEY_LENGTH = 32


class DecryptionError(Exception):
    """Envelope could not be decrypted (tampered, wrong key version, malformed)."""


class EncryptionManager:
    """Derives per-sensitivity keys from a versioned master secret and wraps values in envelopes."""

    def __init__(self, master_secret: str, iterations: int) -> None:
        self.iterations = iterations
        self.key_version = 1
        self._secrets: dict[int, str] = {1: master_secret}
        self._key_cache: dict[tuple[int, str, bytes], bytes] = {}

    def _derive_key(self, version: int, sensitivity: Sensitivity, salt: bytes) -> bytes:
        cache_key = (version, sensitivity.value, salt)
        cached = self._key_cache.get(cache_key)
        if cached is not None:
            return cached
        try:
            secret = self._secrets[version]
        except KeyError:
            raise DecryptionError(f"Unknown key version {version}") from None
        kdf = PBKDF2HMAC(algorithm=hashes.SHA256(), length=32, salt=salt, iterations=self.iterations)
        key = base64.urlsafe_b64encode(kdf.derive(f"{secret}:{sensitivity.value}".encode()))
        if len(self._key_cache) >= KEY_CACHE_LIMIT:
            self._key_cache.pop(next(iter(self._key_cache)))
        self._key_cache[cache_key] = key
        return key

    def encrypt(self, value: Any, sensitivity: Sensitivity | str = Sensitivity.CONFIDENTIAL) -> dict[str, Any]:
        """Wrap a JSON-serializable value. Public values are not encrypted."""
        sensitivity = Sensitivity(sensitivity)
        timestamp = datetime.now(timezone.utc).isoformat()
        if sensitivity == Sensitivity.PUBLIC:
            return {"encrypted": False, "data": value, "sensitivity": sensitivity.value, "timestamp": timestamp}
        salt = os.urandom(SALT_BYTES)
        key = self._derive_key(self.key_version, sensitivity, salt)
        token = Fernet(key).encrypt(json.dumps(value, default=str).encode())
        return {
            "encrypted": True,
            "data": token.decode(),
            "salt": base64.b64encode(salt).decode(),
            "sensitivity": sensitivity.value,
            "algorithm": ALGORITHM,
            "key_version": self.key_version,
            "timestamp": timestamp,
        }

    def decrypt(self, envelope: dict[str, Any]) -> Any:
        if not isinstance(envelope, dict) or "data" not in envelope:
            raise DecryptionError("Malformed envelope")
        if not envelope.get("encrypted"):
            return envelope["data"]
        try:
            sensitivity = Sensitivity(envelope["sensitivity"])
            salt = base64.b64decode(envelope["salt"])
            version = int(envelope.get("key_version", 1))
        except (KeyError, ValueError, TypeError) as e:
            raise DecryptionError("Malformed envelope") from e
        key = self._derive_key(version, sensitivity, salt)
        try:
            raw = Fernet(key).decrypt(envelope["data"].encode())
        except (InvalidToken, AttributeError) as e:
            raise DecryptionError("Envelope could not be decrypted") from e
        return json.loads(raw)

    def encrypt_fields(self, obj: dict[str, Any], field_sensitivity: dict[str, Sensitivity | str]) -> dict[str, Any]:
        """Encrypt the listed fields of a dict; other fields are copied."""
        out = dict(obj)
        for field, level in field_sensitivity.items():
            if field in out and out[field] is not None:
                out[field] = self.encrypt(out[field], level)
        return out

    def decrypt_fields(self, obj: dict[str, Any]) -> dict[str, Any]:
        out = {}
        for field, value in obj.items():
            if isinstance(value, dict) and "encrypted" in value and "data" in value:
                out[field] = self.decrypt(value)
            else:
                out[field] = value
        return out

    @staticmethod
    def hash_value(value: str) -> str:
        return hashlib.sha256(value.encode()).hexdigest()

    def generate_hmac(self, data: str) -> str:
        secret = self._secrets[self.key_version].encode()
        return hmac.new(secret, data.encode(), hashlib.sha256).hexdigest()

    def verify_hmac(self, data: str, signature: str) -> bool:
        return hmac.compare_digest(self.generate_hmac(data), signature)

    @staticmethod
    def validate_key_strength(key: str) -> dict[str, Any]:
        """Five checks worth 25 points each, capped at 100."""
        checks = [
            (len(key) >= MIN_KEY_LENGTH, f"Key should be at least {MIN_KEY_LENGTH} characters"),
            (bool(re.search(r"[A-Z]", key)), "Add uppercase letters"),
            (bool(re.search(r"[a-z]", key)), "Add lowercase letters"),
            (bool(re.search(r"\d", key)), "Add numbers"),
            (bool(re.search(r"[^A-Za-z0-9]", key)), "Add special characters"),
        ]
        score = min(sum(25 for ok, _ in checks if ok), 100)
        feedback = [msg for ok, msg in checks if not ok]
        if score >= 100:
            strength = "strong"
        elif score >= 75:
            strength = "good"
        elif score >= 50:
            strength = "fair"
        else:
            strength = "weak"
        return {"score": score, "strength": strength, "feedback": feedback}

    @staticmethod
    def generate_secure_random(length: int = 32) -> str:
        return secrets.token_urlsafe(length)

    def rotate_keys(self) -> int:
        """Introduce a new master secret; old versions stay available for decryption."""
        self.key_version += 1
        self._secrets[self.key_version] = secrets.token_urlsafe(48)
        self._key_cache.clear()
        logger.info("Encryption keys rotated to version %s", self.key_version)
        return self.key_version

    def get_encryption_status(self) -> dict[str, Any]:
        return {
            "algorithm": ALGORITHM,
            "iterations": self.iterations,
            "key_version": self.key_version,
            "known_versions": sorted(self._secrets),
            "cached_keys": len(self._key_cache),
            "sensitivity_levels": [s.value for s in Sensitivity],
        }


@lru_cache
def get_encryption_manager() -> EncryptionManager:
    settings = get_settings()
    return EncryptionManager(settings.encryption_secret, settings.encryption_iterations)
