"""Configuration management for credledger using pydantic-settings.

Handles Algod client setup, issuer key loading, logging level and the
ledger clients built from them.
"""

from __future__ import annotations

import base64
import logging

from algosdk import mnemonic
from algosdk.v2client.algod import AlgodClient
from nacl.signing import SigningKey
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from credledger.sdk.algorand import AlgorandClaimLedger, AlgorandTrustLedger, algorand_trust_resolver
from credledger.sdk.ledger import TrustResolver


class CredLedgerConfig(BaseSettings):
    """credledger configuration using pydantic-settings BaseSettings."""

    model_config = SettingsConfigDict(
        env_prefix='CREDLEDGER_',
        env_file='.env',
        env_file_encoding='utf-8',
        secrets_dir='/run/secrets'
    )

    algod_url: str = Field(
        default="http://localhost:4001",
        description="Algorand node URL"
    )
    algod_token: str = Field(
        default="aaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa",
        description="Algorand node API token"
    )
    claim_registry_app_id: int | None = Field(
        default=None,
        description="Deployed claim registry application ID"
    )
    trust_registry_app_id: int | None = Field(
        default=None,
        description="Deployed Root of Trust application ID"
    )
    mnemonic: str | None = Field(
        default=None,
        description="Issuer / trust anchor account mnemonic"
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level for the credledger logger"
    )

    @field_validator('claim_registry_app_id', 'trust_registry_app_id')
    @classmethod
    def validate_app_id(cls, v: int | None) -> int | None:
        """Validate app ID is positive if provided."""
        if v is not None and v <= 0:
            raise ValueError("App ID must be positive")
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level


def create_algod_client(config: CredLedgerConfig) -> AlgodClient:
    """Create Algod client from configuration."""
    return AlgodClient(config.algod_token, config.algod_url)


def create_signing_key(config: CredLedgerConfig) -> SigningKey:
    """Ed25519 signing key from the configured account mnemonic."""
    if not config.mnemonic:
        raise ValueError("Mnemonic required. Set CREDLEDGER_MNEMONIC environment variable.")

    try:
        private_key = base64.b64decode(mnemonic.to_private_key(config.mnemonic))
    except Exception as e:
        raise ValueError(f"Invalid mnemonic: {e}") from e
    return SigningKey(private_key[:32])


def validate_config(config: CredLedgerConfig) -> None:
    """Validate configuration completeness for issuer operations."""
    if not config.claim_registry_app_id:
        raise ValueError("Claim registry app ID required. Set CREDLEDGER_CLAIM_REGISTRY_APP_ID environment variable.")
    if not config.mnemonic:
        raise ValueError("Mnemonic required. Set CREDLEDGER_MNEMONIC environment variable.")


def configure_logging(config: CredLedgerConfig) -> None:
    """Apply the configured level to the credledger logger hierarchy."""
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("credledger").setLevel(config.log_level)


def create_claim_ledger(config: CredLedgerConfig) -> AlgorandClaimLedger:
    if not config.claim_registry_app_id:
        raise ValueError("Claim registry app ID required. Set CREDLEDGER_CLAIM_REGISTRY_APP_ID environment variable.")
    return AlgorandClaimLedger(create_algod_client(config), config.claim_registry_app_id)


def create_trust_ledger(config: CredLedgerConfig) -> AlgorandTrustLedger:
    if not config.trust_registry_app_id:
        raise ValueError("Trust registry app ID required. Set CREDLEDGER_TRUST_REGISTRY_APP_ID environment variable.")
    return AlgorandTrustLedger(create_algod_client(config), config.trust_registry_app_id)


def create_trust_resolver(config: CredLedgerConfig) -> TrustResolver:
    return algorand_trust_resolver(create_algod_client(config))
