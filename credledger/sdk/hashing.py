"""Canonical JSON hashing and cryptographic utilities.

Provides the order-independent claim canonicalization that signatures
are computed over, plus ed25519 signing and verification of digests.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any

from nacl.exceptions import BadSignatureError
from nacl.signing import SigningKey, VerifyKey

from credledger.sdk.errors import InvalidInputError, Reason
from credledger.sdk.models import Claim

UNSIGNED_FIELDS = {"signature", "tx"}


def canonical_json(data: dict[str, Any]) -> bytes:
    """Serialize a mapping as sorted, compact UTF-8 JSON."""
    return json.dumps(data, sort_keys=True, separators=(',', ':'), ensure_ascii=False).encode('utf-8')


def canonical_json_hash(data: dict[str, Any]) -> str:
    """Generate deterministic SHA256 hash from canonical JSON.

    Args:
        data: Dictionary to hash

    Returns:
        Hex-encoded SHA256 hash
    """
    if not data:
        raise ValueError("Data cannot be empty")
    return hashlib.sha256(canonical_json(data)).hexdigest()


def canonicalize_claim(claim: Claim) -> bytes:
    """Canonical bytes of a claim's signable content.

    Covers every field except the signature and tx reference. Raises
    InvalidInputError when a field needed for hashing is missing.
    """
    _require_hashable(claim)
    content = claim.model_dump(mode="json", by_alias=True, exclude=UNSIGNED_FIELDS)
    return canonical_json(content)


def claim_hash(claim: Claim) -> bytes:
    """SHA256 digest of the canonical claim bytes."""
    return hashlib.sha256(canonicalize_claim(claim)).digest()


def sign_digest(signing_key: SigningKey, digest: bytes) -> str:
    """Sign a digest with ed25519 and return the hex signature."""
    if not signing_key:
        raise ValueError("Signing key is required")
    return signing_key.sign(digest).signature.hex()


def verify_digest(verify_key: VerifyKey, signature_hex: str | None, digest: bytes) -> bool:
    """Verify an ed25519 signature over a digest."""
    if not verify_key or not signature_hex:
        return False

    try:
        signature_bytes = bytes.fromhex(signature_hex)
        verify_key.verify(digest, signature_bytes)
        return True
    except (ValueError, BadSignatureError):
        return False


def ledger_key(prefix: bytes, value: str) -> bytes:
    """Box name used on-chain: prefix + sha256(value)."""
    return prefix + hashlib.sha256(value.encode('utf-8')).digest()


def _require_hashable(claim: Claim) -> None:
    if not claim.id:
        raise InvalidInputError(Reason.MISSING_CLAIM_ID, "Claim ID is missing")
    if not claim.schema_name:
        raise InvalidInputError(Reason.MISSING_SCHEMA, "Schema name is missing")
    if not claim.owner_did:
        raise InvalidInputError(Reason.MISSING_OWNER, "Owner DID is missing")
    if not claim.attributes:
        raise InvalidInputError(Reason.EMPTY_ATTRIBUTES, "Claim must have at least one attribute")
