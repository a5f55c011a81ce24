"""did:key identities for issuers and registry authorities.

An issuer's DID is the did:key of its Ed25519 verify key, so a verifier
can recover the issuer public key from the DID recorded on the ledger.
"""

from __future__ import annotations

import multibase
from nacl.signing import SigningKey, VerifyKey

DID_KEY_PREFIX = "did:key:"
ED25519_MULTICODEC = b'\xed\x01'


def generate_ed25519_keypair() -> tuple[SigningKey, str]:
    """Generate an Ed25519 signing key and its did:key."""
    signing_key = SigningKey.generate()
    return signing_key, generate_did_key(signing_key)


def generate_did_key(signing_key: SigningKey) -> str:
    """did:key of a signing key's public half."""
    if not signing_key:
        raise ValueError("Signing key is required")
    return public_key_to_did_key(signing_key.verify_key)


def public_key_to_did_key(verify_key: VerifyKey) -> str:
    """Encode a VerifyKey as a base58btc multicodec did:key."""
    multibase_key = multibase.encode('base58btc', ED25519_MULTICODEC + bytes(verify_key))
    return f"{DID_KEY_PREFIX}{multibase_key.decode('utf-8')}"


def did_key_to_public_key(did_key: str) -> VerifyKey:
    """Parse did:key back to VerifyKey."""
    if not validate_did_key_format(did_key):
        raise ValueError(f"Invalid did:key format: {did_key}")

    multicodec_bytes = multibase.decode(did_key[len(DID_KEY_PREFIX):])
    if len(multicodec_bytes) != 34 or multicodec_bytes[:2] != ED25519_MULTICODEC:
        raise ValueError("Invalid Ed25519 multicodec format")
    return VerifyKey(multicodec_bytes[2:])


def validate_did_key_format(did_key: str) -> bool:
    """Validate did:key format for Ed25519 keys."""
    if not isinstance(did_key, str) or not did_key.startswith("did:key:z6Mk"):
        return False

    try:
        multibase.decode(did_key[len(DID_KEY_PREFIX):])
        return True
    except Exception:
        return False
