"""In-process ledger implementations.

Hold schema, claim and trust state in dictionaries with the same
authorization rule as the on-chain programs: only the registry authority
(the key whose did:key was given at construction) may write.
"""

from __future__ import annotations

import threading
from collections.abc import Sequence
from typing import Any

from nacl.signing import SigningKey

from credledger.sdk.did import generate_did_key
from credledger.sdk.errors import LedgerError, SchemaExistsError, SchemaNotFoundError
from credledger.sdk.hashing import canonical_json_hash
from credledger.sdk.models import ClaimStatus, Schema


class _InMemoryLedgerBase:
    """Authority check and tx reference generation shared by both ledgers."""

    def __init__(self, authority_did: str):
        if not authority_did:
            raise ValueError("Authority DID is required")
        self.authority_did = authority_did
        self._lock = threading.Lock()
        self._sequence = 0
        self.transactions: list[dict[str, Any]] = []

    def _authorize(self, signing_key: SigningKey) -> None:
        if generate_did_key(signing_key) != self.authority_did:
            raise LedgerError("Unauthorized: signing key does not control this registry")

    def _record(self, operation: str, key: str, gas: int | None, extra_outputs: Sequence[Any] | None) -> str:
        """Append a transaction and return its reference. Caller holds the lock."""
        self._sequence += 1
        tx = {
            "op": operation,
            "key": key,
            "seq": self._sequence,
            "gas": gas or 0,
            "outputs": len(extra_outputs or ()),
        }
        tx_id = canonical_json_hash(tx)
        self.transactions.append({**tx, "tx": tx_id})
        return tx_id


class InMemoryClaimLedger(_InMemoryLedgerBase):
    """Schema registry and claim status store for a single issuer."""

    def __init__(self, authority_did: str):
        super().__init__(authority_did)
        self._schemas: dict[str, Schema] = {}
        self._claims: dict[str, ClaimStatus] = {}

    def get_schema_details(self, name: str) -> Schema:
        with self._lock:
            schema = self._schemas.get(name)
        if schema is None:
            raise SchemaNotFoundError(name)
        return schema

    def register_schema(
        self,
        schema: Schema,
        signing_key: SigningKey,
        gas: int | None = None,
        extra_outputs: Sequence[Any] | None = None,
    ) -> str:
        self._authorize(signing_key)
        with self._lock:
            if schema.name in self._schemas:
                raise SchemaExistsError(schema.name)
            tx_id = self._record("register_schema", schema.name, gas, extra_outputs)
            self._schemas[schema.name] = schema.model_copy(update={"tx": tx_id})
        return tx_id

    def get_issuer_did(self) -> str:
        return self.authority_did

    def is_valid_claim(self, claim_id: str) -> bool:
        with self._lock:
            return self._claims.get(claim_id) == ClaimStatus.VALID

    def inject_claim(
        self,
        claim_id: str,
        signing_key: SigningKey,
        gas: int | None = None,
        extra_outputs: Sequence[Any] | None = None,
    ) -> str:
        self._authorize(signing_key)
        with self._lock:
            if claim_id in self._claims:
                raise LedgerError(f"Claim already recorded: {claim_id}")
            tx_id = self._record("inject_claim", claim_id, gas, extra_outputs)
            self._claims[claim_id] = ClaimStatus.VALID
        return tx_id

    def revoke_claim(
        self,
        claim_id: str,
        signing_key: SigningKey,
        gas: int | None = None,
        extra_outputs: Sequence[Any] | None = None,
    ) -> str:
        self._authorize(signing_key)
        with self._lock:
            if self._claims.get(claim_id) != ClaimStatus.VALID:
                raise LedgerError(f"Claim is not valid: {claim_id}")
            tx_id = self._record("revoke_claim", claim_id, gas, extra_outputs)
            self._claims[claim_id] = ClaimStatus.REVOKED
        return tx_id


class InMemoryTrustLedger(_InMemoryLedgerBase):
    """Root of Trust store keyed by (issuer DID, schema name)."""

    def __init__(self, authority_did: str):
        super().__init__(authority_did)
        self._records: dict[tuple[str, str], bool] = {}

    def is_trusted(self, issuer_did: str, schema_name: str) -> bool:
        with self._lock:
            return self._records.get((issuer_did, schema_name), False)

    def register_issuer(
        self,
        issuer_did: str,
        schema_name: str,
        signing_key: SigningKey,
        gas: int | None = None,
        extra_outputs: Sequence[Any] | None = None,
    ) -> str:
        return self._set(issuer_did, schema_name, True, signing_key, gas, extra_outputs)

    def deactivate_issuer(
        self,
        issuer_did: str,
        schema_name: str,
        signing_key: SigningKey,
        gas: int | None = None,
        extra_outputs: Sequence[Any] | None = None,
    ) -> str:
        return self._set(issuer_did, schema_name, False, signing_key, gas, extra_outputs)

    def _set(
        self,
        issuer_did: str,
        schema_name: str,
        active: bool,
        signing_key: SigningKey,
        gas: int | None,
        extra_outputs: Sequence[Any] | None,
    ) -> str:
        self._authorize(signing_key)
        operation = "register_issuer" if active else "deactivate_issuer"
        with self._lock:
            tx_id = self._record(operation, f"{issuer_did}|{schema_name}", gas, extra_outputs)
            self._records[(issuer_did, schema_name)] = active
        return tx_id
