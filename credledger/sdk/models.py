"""Pydantic models for credledger data structures.

Provides type-safe definitions for schemas, claims, trust records and
verification outcomes. Claims serialize with camelCase aliases so their
JSON form is stable for canonical hashing.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ClaimStatus(str, Enum):
    """On-ledger claim status."""
    VALID = "A"
    REVOKED = "R"


class VerificationStatus(str, Enum):
    """Outcome of a full claim validation."""
    VALID = "valid"
    INVALID_SIGNATURE = "invalid_signature"
    REVOKED = "revoked"
    NOT_YET_VALID = "not_yet_valid"
    EXPIRED = "expired"
    REJECTED = "rejected"


class Schema(BaseModel):
    """Attribute schema registered by an issuer."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Schema name, unique per issuer registry")
    attributes: list[str] = Field(..., description="Ordered attribute names")
    revocable: bool = Field(..., description="Whether claims of this schema can be revoked")
    tx: str | None = Field(default=None, description="Registration transaction reference")

    def definition(self) -> dict[str, Any]:
        """Ledger-stored definition (everything but the tx reference)."""
        return {"name": self.name, "attributes": list(self.attributes), "revocable": self.revocable}


class Claim(BaseModel):
    """Attestation of attribute values about a subject.

    Instances are immutable; signing and issuance return updated copies.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(default="", description="Claim ID, unique within the issuer namespace")
    schema_name: str = Field(default="", alias="schema", description="Name of the claim's schema")
    owner_did: str = Field(default="", alias="ownerDID", description="Subject DID")
    issuer_did: str | None = Field(default=None, alias="issuerDID", description="Issuer DID, set on issuance")
    attributes: dict[str, Any] = Field(default_factory=dict, description="Attribute values")
    valid_from: datetime | None = Field(default=None, alias="validFrom")
    valid_to: datetime | None = Field(default=None, alias="validTo")
    signature: str | None = Field(default=None, description="Hex Ed25519 signature over the claim hash")
    tx: str | None = Field(default=None, description="Issuance or revocation transaction reference")

    @field_validator("valid_from", "valid_to")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        """Interpret naive timestamps as UTC."""
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    def is_within_validity(self, at: datetime) -> bool:
        """Check validFrom <= at <= validTo, either bound optional."""
        if self.valid_from is not None and at < self.valid_from:
            return False
        if self.valid_to is not None and at > self.valid_to:
            return False
        return True


class TrustRecord(BaseModel):
    """Root of Trust entry for an (issuer, schema) pair."""

    model_config = ConfigDict(frozen=True)

    issuer_did: str
    schema_name: str
    active: bool = False


class VerificationResult(BaseModel):
    """Result of Verifier.inspect_claim."""

    model_config = ConfigDict(frozen=True)

    claim_id: str
    status: VerificationStatus
    checked_at: datetime

    @property
    def is_valid(self) -> bool:
        return self.status == VerificationStatus.VALID
