"""Shared fixtures: an issuer key, in-memory ledgers and a registered KYC schema."""

from __future__ import annotations

import pytest
from nacl.signing import SigningKey

from credledger.sdk.did import generate_did_key
from credledger.sdk.issuer import Issuer
from credledger.sdk.memory import InMemoryClaimLedger, InMemoryTrustLedger
from credledger.sdk.models import Claim, Schema
from credledger.sdk.verifier import Verifier

KYC_ATTRIBUTES = ["firstName", "lastName", "age"]
OWNER_DID = "did:example:alice"
ROT_ADDRESS = "rot-app-1"


@pytest.fixture
def issuer_key() -> SigningKey:
    """Issuer's ed25519 signing key."""
    return SigningKey.generate()


@pytest.fixture
def issuer_did(issuer_key: SigningKey) -> str:
    return generate_did_key(issuer_key)


@pytest.fixture
def ledger(issuer_did: str) -> InMemoryClaimLedger:
    """Claim registry controlled by the issuer."""
    return InMemoryClaimLedger(issuer_did)


@pytest.fixture
def trust_key() -> SigningKey:
    """Root of Trust anchor key."""
    return SigningKey.generate()


@pytest.fixture
def trust_ledger(trust_key: SigningKey) -> InMemoryTrustLedger:
    return InMemoryTrustLedger(generate_did_key(trust_key))


@pytest.fixture
def verifier(ledger: InMemoryClaimLedger, trust_ledger: InMemoryTrustLedger) -> Verifier:
    return Verifier(ledger, trust_resolver={ROT_ADDRESS: trust_ledger}.__getitem__)


@pytest.fixture
def issuer(ledger: InMemoryClaimLedger, verifier: Verifier) -> Issuer:
    return Issuer(ledger, verifier)


@pytest.fixture
def kyc_schema(issuer: Issuer, issuer_key: SigningKey) -> Schema:
    """KYC schema registered in the issuer's registry."""
    return issuer.register_new_schema("KYC", KYC_ATTRIBUTES, True, issuer_key)


@pytest.fixture
def kyc_claim(issuer: Issuer, kyc_schema: Schema) -> Claim:
    """Unsigned KYC claim for Alice."""
    return issuer.create_claim("c1", kyc_schema.name, {"firstName": "John", "lastName": "Doe", "age": 26}, OWNER_DID)
