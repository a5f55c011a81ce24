"""Claim issuance and revocation.

The Issuer reuses a Verifier for schema lookup and structural validation,
signs claims with the issuer's ed25519 key and records issuance,
revocation and schema registration on the issuer's ledger registry.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime
from typing import Any

from nacl.signing import SigningKey

from credledger.sdk.errors import (
    ClaimSubmissionError,
    InvalidInputError,
    IssuerResolutionError,
    LedgerError,
    Reason,
)
from credledger.sdk.hashing import claim_hash, sign_digest
from credledger.sdk.ledger import ClaimLedger
from credledger.sdk.models import Claim, Schema
from credledger.sdk.verifier import Verifier

logger = logging.getLogger(__name__)


class Issuer:
    """Issuer's interface to create, issue and revoke claims."""

    def __init__(self, ledger: ClaimLedger, verifier: Verifier | None = None):
        """Initialize issuer.

        Args:
            ledger: The issuer's own claim ledger
            verifier: Verifier bound to the same ledger (created if omitted)
        """
        if ledger is None:
            raise ValueError("Ledger client is required")

        self.ledger = ledger
        self.verifier = verifier or Verifier(ledger)

    def create_claim(
        self,
        claim_id: str,
        schema_name: str,
        attributes: dict[str, Any],
        owner_did: str,
        valid_from: datetime | None = None,
        valid_to: datetime | None = None,
    ) -> Claim:
        """Build a claim without validating it against its schema."""
        return Claim(
            id=claim_id,
            schema_name=schema_name,
            attributes=attributes,
            owner_did=owner_did,
            valid_from=valid_from,
            valid_to=valid_to,
        )

    def validate_claim_structure(self, claim: Claim) -> Claim:
        return self.verifier.validate_claim_structure(claim)

    def sign_claim(self, claim: Claim, signing_key: SigningKey) -> Claim:
        """Return a copy of the claim carrying the issuer's signature."""
        signature = sign_digest(signing_key, claim_hash(claim))
        return claim.model_copy(update={"signature": signature}, deep=True)

    def issue_claim(
        self,
        claim: Claim,
        signing_key: SigningKey,
        gas: int | None = None,
        extra_outputs: Sequence[Any] | None = None,
    ) -> Claim:
        """Validate, sign and record a claim on the ledger.

        Raises InvalidInputError, SchemaNotFoundError or IssuerResolutionError
        before any ledger write. If recording fails with a LedgerError,
        ClaimSubmissionError carries the signed claim so the caller can decide
        whether to resubmit. The returned claim shares no state with the input.
        """
        self.validate_claim_structure(claim)

        issuer_did = self.ledger.get_issuer_did()
        if not issuer_did:
            raise IssuerResolutionError("Issuer DID is not recorded on the ledger")
        signed = self.sign_claim(claim.model_copy(update={"issuer_did": issuer_did}, deep=True), signing_key)

        try:
            tx = self.ledger.inject_claim(signed.id, signing_key, gas, extra_outputs)
        except LedgerError as e:
            raise ClaimSubmissionError(f"Claim {signed.id} was signed but not recorded: {e}", signed) from e

        logger.info("Issued claim %r of schema %r to %s (tx %s)", signed.id, signed.schema_name, signed.owner_did, tx)
        return signed.model_copy(update={"tx": tx})

    def revoke_claim_by_id(
        self,
        claim_id: str,
        signing_key: SigningKey,
        gas: int | None = None,
        extra_outputs: Sequence[Any] | None = None,
    ) -> str | None:
        """Revoke a claim; returns None if it was never issued or already revoked."""
        if not claim_id:
            raise InvalidInputError(Reason.MISSING_CLAIM_ID, "Claim ID is missing")

        if not self.ledger.is_valid_claim(claim_id):
            logger.info("Claim %r is not currently valid, nothing to revoke", claim_id)
            return None

        tx = self.ledger.revoke_claim(claim_id, signing_key, gas, extra_outputs)
        logger.info("Revoked claim %r (tx %s)", claim_id, tx)
        return tx

    def revoke_claim(
        self,
        claim: Claim | None,
        signing_key: SigningKey,
        gas: int | None = None,
        extra_outputs: Sequence[Any] | None = None,
    ) -> str | None:
        if claim is None:
            raise InvalidInputError(Reason.MISSING_CLAIM, "Claim must be defined")
        return self.revoke_claim_by_id(claim.id, signing_key, gas, extra_outputs)

    def register_new_schema(
        self,
        name: str,
        attributes: Sequence[str],
        revocable: bool,
        signing_key: SigningKey,
        gas: int | None = None,
        extra_outputs: Sequence[Any] | None = None,
    ) -> Schema:
        """Register a schema in the issuer's registry; returns it with tx populated."""
        if not name:
            raise InvalidInputError(Reason.MISSING_SCHEMA_NAME, "Schema name is mandatory")
        if not attributes:
            raise InvalidInputError(Reason.EMPTY_SCHEMA_ATTRIBUTES, "Schema must have at least one attribute")

        duplicates = tuple(sorted({attr for attr in attributes if list(attributes).count(attr) > 1}))
        if duplicates:
            raise InvalidInputError(
                Reason.DUPLICATE_ATTRIBUTES,
                f"Schema attributes must be unique: {', '.join(duplicates)}",
                duplicates,
            )

        schema = Schema(name=name, attributes=list(attributes), revocable=revocable)
        tx = self.ledger.register_schema(schema, signing_key, gas, extra_outputs)
        logger.info("Registered schema %r with attributes %s (tx %s)", name, schema.attributes, tx)
        return schema.model_copy(update={"tx": tx})
