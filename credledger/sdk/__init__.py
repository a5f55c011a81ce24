"""credledger SDK: claim model, verifier, issuer and Root of Trust."""

from credledger.sdk.errors import (
    ClaimSubmissionError,
    CredLedgerError,
    InvalidInputError,
    IssuerResolutionError,
    LedgerError,
    Reason,
    SchemaExistsError,
    SchemaNotFoundError,
)
from credledger.sdk.issuer import Issuer
from credledger.sdk.models import Claim, Schema, TrustRecord, VerificationResult, VerificationStatus
from credledger.sdk.trust import RootOfTrust
from credledger.sdk.verifier import Verifier

__all__ = [
    "Claim",
    "ClaimSubmissionError",
    "CredLedgerError",
    "InvalidInputError",
    "Issuer",
    "IssuerResolutionError",
    "LedgerError",
    "Reason",
    "RootOfTrust",
    "Schema",
    "SchemaExistsError",
    "SchemaNotFoundError",
    "TrustRecord",
    "VerificationResult",
    "VerificationStatus",
    "Verifier",
]
