"""Root of Trust registry.

Relying parties consult it to decide which issuers are authorized for
which schema. Each entry is an active/inactive toggle on the pair
(issuer DID, schema name); an absent entry means not trusted.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from nacl.signing import SigningKey

from credledger.sdk.errors import InvalidInputError, Reason
from credledger.sdk.ledger import TrustLedger
from credledger.sdk.models import TrustRecord

logger = logging.getLogger(__name__)


class RootOfTrust:
    """Client for one Root of Trust registry."""

    def __init__(self, ledger: TrustLedger):
        if ledger is None:
            raise ValueError("Trust ledger is required")
        self.ledger = ledger

    def register_issuer(
        self,
        issuer_did: str,
        schema_name: str,
        signing_key: SigningKey,
        gas: int | None = None,
        extra_outputs: Sequence[Any] | None = None,
    ) -> str:
        """Mark issuer_did as trusted for schema_name; returns the tx reference."""
        _validate_pair(issuer_did, schema_name)
        tx = self.ledger.register_issuer(issuer_did, schema_name, signing_key, gas, extra_outputs)
        logger.info("Registered issuer %s for schema %r (tx %s)", issuer_did, schema_name, tx)
        return tx

    def deactivate_issuer(
        self,
        issuer_did: str,
        schema_name: str,
        signing_key: SigningKey,
        gas: int | None = None,
        extra_outputs: Sequence[Any] | None = None,
    ) -> str:
        """Withdraw trust from issuer_did for schema_name; returns the tx reference."""
        _validate_pair(issuer_did, schema_name)
        tx = self.ledger.deactivate_issuer(issuer_did, schema_name, signing_key, gas, extra_outputs)
        logger.info("Deactivated issuer %s for schema %r (tx %s)", issuer_did, schema_name, tx)
        return tx

    def is_trusted(self, issuer_did: str, schema_name: str) -> bool:
        if not issuer_did or not schema_name:
            return False
        return self.ledger.is_trusted(issuer_did, schema_name)

    def get_trust_record(self, issuer_did: str, schema_name: str) -> TrustRecord:
        """Current trust state of the pair as a record."""
        return TrustRecord(
            issuer_did=issuer_did,
            schema_name=schema_name,
            active=self.is_trusted(issuer_did, schema_name),
        )


def _validate_pair(issuer_did: str, schema_name: str) -> None:
    if not issuer_did:
        raise InvalidInputError(Reason.MISSING_ISSUER_DID, "Issuer DID is missing")
    if not schema_name:
        raise InvalidInputError(Reason.MISSING_SCHEMA_NAME, "Schema name is missing")
