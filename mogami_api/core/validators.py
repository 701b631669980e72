"""
Field validation rules shared by the input schemas
"""
import re
from typing import Optional
from urllib.parse import urlparse

# Base58 alphabet (no 0, O, I, l); Solana public keys encode to 32-44 characters
PUBLIC_KEY_PATTERN = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$")

URL_SCHEMES = ("http", "https")


def is_url(value: Optional[str]) -> bool:
    """True for absolute http(s) URLs with a host"""
    if not value or any(ch.isspace() for ch in value):
        return False
    try:
        parsed = urlparse(value)
        port = parsed.port
    except ValueError:
        return False
    if parsed.scheme not in URL_SCHEMES or not parsed.hostname:
        return False
    if port is not None and not 0 < port < 65536:
        return False
    host = parsed.hostname
    return host == "localhost" or "." in host


def is_public_key(value: Optional[str]) -> bool:
    return bool(value) and PUBLIC_KEY_PATTERN.match(value) is not None
