"""Reversible external identifiers ("IDEs") for entity ids.

An IDE is the base-36 id prefixed with a short signature bound to the entity
type name, so an IDE handed out for one entity type does not decode as a
valid reference to another. The signature is spelled with letters only, so
an IDE is never mistaken for a digit-only id.
"""

from __future__ import annotations

import hashlib
import hmac

from skyapi.core.config import get_api_settings
from skyapi.models.errors import InvalidReferenceError

SIGNATURE_LENGTH = 8
_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
_SIGNATURE_LETTERS = str.maketrans("0123456789abcdef", "ghijklmnopqrstuv")


def _to_base36(value: int) -> str:
    digits: list[str] = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_ALPHABET[remainder])
    return "".join(reversed(digits)) or "0"


def _signature(entity_name: str, entity_id: int, secret: str) -> str:
    message = f"{entity_name}:{entity_id}".encode()
    digest = hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()
    return digest[:SIGNATURE_LENGTH].translate(_SIGNATURE_LETTERS)


def encode_ide(entity_name: str, entity_id: int, *, secret: str | None = None) -> str:
    """Return the external identifier for ``entity_id``."""
    if isinstance(entity_id, bool) or not isinstance(entity_id, int) or entity_id <= 0:
        raise InvalidReferenceError("Entity ids must be positive integers")
    if secret is None:
        secret = get_api_settings().ide_secret
    return _signature(entity_name, entity_id, secret) + _to_base36(entity_id)


def decode_ide(entity_name: str, ide: str, *, secret: str | None = None) -> int:
    """Return the id encoded in ``ide`` or raise ``InvalidReferenceError``."""
    if not isinstance(ide, str) or len(ide) <= SIGNATURE_LENGTH:
        raise InvalidReferenceError("Malformed external identifier")
    signature, encoded = ide[:SIGNATURE_LENGTH].lower(), ide[SIGNATURE_LENGTH:].lower()
    try:
        entity_id = int(encoded, 36)
    except ValueError:
        raise InvalidReferenceError("Malformed external identifier") from None
    if entity_id <= 0 or _to_base36(entity_id) != encoded:
        raise InvalidReferenceError("Malformed external identifier")
    if secret is None:
        secret = get_api_settings().ide_secret
    if not hmac.compare_digest(signature.encode(), _signature(entity_name, entity_id, secret).encode()):
        raise InvalidReferenceError(f"External identifier does not belong to {entity_name}")
    return entity_id
