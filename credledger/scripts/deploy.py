"""Deploy the claim registry and Root of Trust applications.

Uses the env-configured Algod node and mnemonic; the mnemonic's account
becomes both the issuer (its did:key is stored in the claim registry)
and the trust anchor. Logs the new application IDs.
"""

from __future__ import annotations

import logging

from credledger.config import CredLedgerConfig, configure_logging, create_algod_client, create_signing_key
from credledger.sdk.algorand import deploy_claim_registry, deploy_trust_registry
from credledger.sdk.did import generate_did_key

logger = logging.getLogger(__name__)


def deploy(config: CredLedgerConfig) -> tuple[int, int]:
    """Deploy both applications and return (claim_registry_app_id, trust_registry_app_id)."""
    if not config.mnemonic:
        raise ValueError("Deployer mnemonic required. Set CREDLEDGER_MNEMONIC environment variable.")

    algod_client = create_algod_client(config)
    signing_key = create_signing_key(config)
    logger.info("Deploying registries for issuer %s", generate_did_key(signing_key))

    claim_app_id = deploy_claim_registry(algod_client, signing_key)
    trust_app_id = deploy_trust_registry(algod_client, signing_key)
    return claim_app_id, trust_app_id


def main() -> int:
    config = CredLedgerConfig()
    configure_logging(config)
    try:
        claim_app_id, trust_app_id = deploy(config)
    except Exception:
        logger.exception("Deployment failed")
        return 1

    logger.info("CREDLEDGER_CLAIM_REGISTRY_APP_ID=%d", claim_app_id)
    logger.info("CREDLEDGER_TRUST_REGISTRY_APP_ID=%d", trust_app_id)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
