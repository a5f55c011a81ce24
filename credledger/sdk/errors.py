"""Error taxonomy for claim and trust operations.

Input errors are raised before any ledger call. Ledger errors wrap
failures of the remote collaborator and are never retried here.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from credledger.sdk.models import Claim


class Reason(str, Enum):
    """Why an input was rejected."""
    MISSING_SCHEMA = "MissingSchema"
    MISSING_OWNER = "MissingOwner"
    EMPTY_ATTRIBUTES = "EmptyAttributes"
    UNKNOWN_ATTRIBUTES = "UnknownAttributes"
    MISSING_ATTRIBUTES = "MissingAttributes"
    MISSING_CLAIM = "MissingClaim"
    MISSING_CLAIM_ID = "MissingClaimId"
    MISSING_SCHEMA_NAME = "MissingSchemaName"
    EMPTY_SCHEMA_ATTRIBUTES = "EmptySchemaAttributes"
    DUPLICATE_ATTRIBUTES = "DuplicateAttributes"
    MISSING_ISSUER_DID = "MissingIssuerDID"


class CredLedgerError(Exception):
    """Base class for all credledger errors."""


class InvalidInputError(CredLedgerError, ValueError):
    """Caller supplied a malformed claim, schema or argument."""

    def __init__(self, reason: Reason, message: str, attributes: tuple[str, ...] = ()):
        super().__init__(message)
        self.reason = reason
        self.attributes = attributes


class SchemaNotFoundError(CredLedgerError, LookupError):
    """Schema name is not registered on the ledger."""

    def __init__(self, schema_name: str):
        super().__init__(f"Schema not found: {schema_name}")
        self.schema_name = schema_name


class SchemaExistsError(CredLedgerError):
    """Schema name is already registered."""

    def __init__(self, schema_name: str):
        super().__init__(f"Schema already exists: {schema_name}")
        self.schema_name = schema_name


class IssuerResolutionError(CredLedgerError, LookupError):
    """Issuer identity or public key could not be resolved."""


class LedgerError(CredLedgerError):
    """Remote ledger call failed (network, node or contract rejection)."""


class ClaimSubmissionError(LedgerError):
    """Claim was signed but recording it on the ledger failed.

    The signed claim is kept on the exception so the caller can decide
    whether to resubmit it.
    """

    def __init__(self, message: str, claim: Claim):
        super().__init__(message)
        self.claim = claim
