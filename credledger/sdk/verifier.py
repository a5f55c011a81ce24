"""Claim verification against an issuer's ledger registry.

Checks claim structure, issuer signature, revocation status, validity
window and Root of Trust membership. Business-rule failures return False;
ledger failures propagate to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from nacl.signing import VerifyKey

from credledger.sdk.did import did_key_to_public_key
from credledger.sdk.errors import InvalidInputError, IssuerResolutionError, Reason
from credledger.sdk.hashing import claim_hash, verify_digest
from credledger.sdk.ledger import ClaimLedger, TrustResolver
from credledger.sdk.models import Claim, Schema, VerificationResult, VerificationStatus
from credledger.sdk.trust import RootOfTrust

logger = logging.getLogger(__name__)

ClaimPredicate = Callable[[Claim], bool]


class Verifier:
    """Relying-party view of an issuer's claim registry."""

    def __init__(self, ledger: ClaimLedger, trust_resolver: TrustResolver | None = None):
        """Initialize verifier.

        Args:
            ledger: Claim ledger of the issuer whose claims are verified
            trust_resolver: Maps a Root of Trust address to its TrustLedger
        """
        if ledger is None:
            raise ValueError("Ledger client is required")

        self.ledger = ledger
        self.trust_resolver = trust_resolver

    def get_schema_details(self, name: str) -> Schema:
        """Fetch a schema; raises SchemaNotFoundError if unknown."""
        return self.ledger.get_schema_details(name)

    def validate_claim_structure(self, claim: Claim) -> Claim:
        """Validate mandatory fields and the attribute set against the schema.

        Rules run in order and the first violation is raised as
        InvalidInputError. Unknown attributes are reported before missing ones.
        """
        if not claim.schema_name:
            raise InvalidInputError(Reason.MISSING_SCHEMA, "Schema name is missing")
        if not claim.owner_did:
            raise InvalidInputError(Reason.MISSING_OWNER, "Owner DID is missing")
        if not claim.attributes:
            raise InvalidInputError(Reason.EMPTY_ATTRIBUTES, "Claim must have at least one attribute")

        schema = self.get_schema_details(claim.schema_name)

        unknown = tuple(attr for attr in claim.attributes if attr not in schema.attributes)
        if unknown:
            raise InvalidInputError(
                Reason.UNKNOWN_ATTRIBUTES,
                f"The following attributes are not part of schema {claim.schema_name}: {', '.join(unknown)}",
                unknown,
            )

        missing = tuple(attr for attr in schema.attributes if attr not in claim.attributes)
        if missing:
            raise InvalidInputError(
                Reason.MISSING_ATTRIBUTES,
                f"The following attributes of schema {claim.schema_name} are missing in the claim: {', '.join(missing)}",
                missing,
            )

        return claim

    def verify_offline(self, claim: Claim, issuer_public_key: VerifyKey) -> bool:
        """Check the claim signature against a known issuer key, without I/O."""
        digest = claim_hash(claim)
        return verify_digest(issuer_public_key, claim.signature, digest)

    def verify(self, claim: Claim) -> bool:
        """Check the claim signature against the issuer key recorded on the ledger."""
        issuer_did = self.ledger.get_issuer_did()
        if not issuer_did:
            raise IssuerResolutionError("Issuer DID is not recorded on the ledger")
        if not claim.issuer_did:
            logger.debug("Claim %r has no issuer DID", claim.id)
            return False
        if claim.issuer_did != issuer_did:
            logger.debug("Claim %r issued by %s, registry belongs to %s", claim.id, claim.issuer_did, issuer_did)
            return False

        return self.verify_offline(claim, self._resolve_public_key(issuer_did))

    def validate_claim(
        self,
        claim: Claim,
        custom_validator: ClaimPredicate | None = None,
        *,
        at: datetime | None = None,
    ) -> bool:
        """Signature, revocation, validity window and custom rule checks."""
        return self.inspect_claim(claim, custom_validator, at=at).is_valid

    def inspect_claim(
        self,
        claim: Claim,
        custom_validator: ClaimPredicate | None = None,
        *,
        at: datetime | None = None,
    ) -> VerificationResult:
        """Run the validate_claim checks and report which one failed."""
        now = _as_utc(at) if at else datetime.now(timezone.utc)
        status = self._first_failure(claim, custom_validator, now)
        if status != VerificationStatus.VALID:
            logger.debug("Claim %r failed validation: %s", claim.id, status.value)
        return VerificationResult(claim_id=claim.id, status=status, checked_at=now)

    def is_issuer_trusted(self, rot_address: Any, issuer_did: str, schema_name: str) -> bool:
        """Ask the Root of Trust at rot_address whether issuer_did may issue schema_name."""
        if self.trust_resolver is None:
            raise ValueError("Trust resolver not configured")

        root_of_trust = RootOfTrust(self.trust_resolver(rot_address))
        return root_of_trust.is_trusted(issuer_did, schema_name)

    def _first_failure(self, claim: Claim, custom_validator: ClaimPredicate | None, now: datetime) -> VerificationStatus:
        if not self.verify(claim):
            return VerificationStatus.INVALID_SIGNATURE
        if not self.ledger.is_valid_claim(claim.id):
            return VerificationStatus.REVOKED
        if claim.valid_from is not None and now < claim.valid_from:
            return VerificationStatus.NOT_YET_VALID
        if not claim.is_within_validity(now):
            return VerificationStatus.EXPIRED
        if custom_validator is not None and not custom_validator(claim):
            return VerificationStatus.REJECTED
        return VerificationStatus.VALID

    def _resolve_public_key(self, issuer_did: str) -> VerifyKey:
        try:
            return did_key_to_public_key(issuer_did)
        except ValueError as e:
            raise IssuerResolutionError(f"Cannot resolve public key for issuer {issuer_did}: {e}") from e


def _as_utc(at: datetime) -> datetime:
    return at if at.tzinfo else at.replace(tzinfo=timezone.utc)
