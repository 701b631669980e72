"""
Token issuance, password hashing and secret encryption
"""
import binascii
import hashlib
import hmac
import logging
import os
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from cryptography.fernet import Fernet, InvalidToken

from mogami_api.core.config import settings

logger = logging.getLogger(__name__)

PASSWORD_ALGORITHM = "pbkdf2_sha256"
PASSWORD_ITERATIONS = 390_000


def create_access_token(subject: str, extra_claims: Optional[Dict[str, Any]] = None, expires_delta: Optional[timedelta] = None) -> str:
    """Issue a signed JWT for ``subject`` (the user id)"""
    issued_at = datetime.now(timezone.utc)
    expires_at = issued_at + (expires_delta or timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES))
    claims: Dict[str, Any] = {
        "sub": subject,
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    if extra_claims:
        claims.update(extra_claims)
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Return the token claims, or None when the token is expired or invalid"""
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.debug("Rejected expired access token")
        return None
    except jwt.InvalidTokenError as e:
        logger.debug(f"Rejected invalid access token: {e}")
        return None


def hash_password(password: str, *, iterations: int = PASSWORD_ITERATIONS) -> str:
    """Encode ``password`` as ``algorithm$iterations$salt$digest``"""
    salt = os.urandom(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return "$".join([
        PASSWORD_ALGORITHM,
        str(iterations),
        binascii.hexlify(salt).decode("ascii"),
        binascii.hexlify(digest).decode("ascii"),
    ])


def verify_password(password: str, encoded: Optional[str]) -> bool:
    if not encoded:
        return False
    try:
        algorithm, iterations, salt_hex, digest_hex = encoded.split("$")
    except ValueError:
        return False
    if algorithm != PASSWORD_ALGORITHM:
        return False
    derived = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        binascii.unhexlify(salt_hex),
        int(iterations),
    )
    return hmac.compare_digest(derived, binascii.unhexlify(digest_hex))


def _fernet() -> Optional[Fernet]:
    if not settings.SECRETS_ENCRYPTION_KEY:
        return None
    return Fernet(settings.SECRETS_ENCRYPTION_KEY.encode("utf-8"))


def encrypt_secret(value: Optional[str]) -> Optional[str]:
    """Encrypt a secret at rest; stored as plain text when no key is configured"""
    if value is None:
        return None
    fernet = _fernet()
    if fernet is None:
        return value
    return fernet.encrypt(value.encode("utf-8")).decode("utf-8")


def decrypt_secret(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    fernet = _fernet()
    if fernet is None:
        return value
    try:
        return fernet.decrypt(value.encode("utf-8")).decode("utf-8")
    except InvalidToken:
        # Stored before encryption was enabled
        logger.warning("Secret could not be decrypted, returning stored value")
        return value
