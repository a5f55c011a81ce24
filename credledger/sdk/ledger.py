"""Ledger capability interfaces consumed by the verifier, issuer and trust registry.

Implementations: credledger.sdk.memory (in-process) and
credledger.sdk.algorand (Beaker applications on Algorand).
Every method is a blocking remote call that may raise LedgerError.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, Protocol

from nacl.signing import SigningKey

from credledger.sdk.models import Schema


class SchemaRegistry(Protocol):
    """Schema reads and writes against an issuer's registry."""

    def get_schema_details(self, name: str) -> Schema:
        """Return the schema or raise SchemaNotFoundError."""
        ...

    def register_schema(
        self,
        schema: Schema,
        signing_key: SigningKey,
        gas: int | None = None,
        extra_outputs: Sequence[Any] | None = None,
    ) -> str:
        """Record a new schema and return the tx reference."""
        ...

    def get_issuer_did(self) -> str:
        """DID of the authority that owns this registry."""
        ...


class ClaimLedger(SchemaRegistry, Protocol):
    """Schema registry plus claim issuance and revocation markers."""

    def is_valid_claim(self, claim_id: str) -> bool:
        """True only if the claim was issued and not revoked."""
        ...

    def inject_claim(
        self,
        claim_id: str,
        signing_key: SigningKey,
        gas: int | None = None,
        extra_outputs: Sequence[Any] | None = None,
    ) -> str:
        ...

    def revoke_claim(
        self,
        claim_id: str,
        signing_key: SigningKey,
        gas: int | None = None,
        extra_outputs: Sequence[Any] | None = None,
    ) -> str:
        ...


class TrustLedger(Protocol):
    """Root of Trust toggles keyed by (issuer DID, schema name)."""

    def is_trusted(self, issuer_did: str, schema_name: str) -> bool:
        ...

    def register_issuer(
        self,
        issuer_did: str,
        schema_name: str,
        signing_key: SigningKey,
        gas: int | None = None,
        extra_outputs: Sequence[Any] | None = None,
    ) -> str:
        ...

    def deactivate_issuer(
        self,
        issuer_did: str,
        schema_name: str,
        signing_key: SigningKey,
        gas: int | None = None,
        extra_outputs: Sequence[Any] | None = None,
    ) -> str:
        ...


# Maps a Root of Trust address (app ID, script hash...) to its ledger client.
TrustResolver = Callable[[Any], TrustLedger]
