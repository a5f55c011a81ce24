"""Algorand ledger adapters.

Drive the claim registry and Root of Trust Beaker applications through
ApplicationClient for writes and read box / global state directly from
algod. An issuer's ed25519 SigningKey doubles as its Algorand account.
"""

from __future__ import annotations

import base64
import json
import logging
from collections.abc import Callable, Sequence
from typing import Any

from algosdk import constants, encoding, transaction
from algosdk.atomic_transaction_composer import AccountTransactionSigner, AtomicTransactionComposer
from algosdk.error import AlgodHTTPError
from algosdk.v2client.algod import AlgodClient
from beaker import Application
from beaker.client import ApplicationClient
from nacl.signing import SigningKey

from credledger.contracts import claim_registry, trust_registry
from credledger.sdk.did import generate_did_key
from credledger.sdk.errors import LedgerError, SchemaExistsError, SchemaNotFoundError
from credledger.sdk.hashing import canonical_json, ledger_key
from credledger.sdk.models import Schema

logger = logging.getLogger(__name__)

# Covers minimum balance for the app account plus a handful of small boxes
DEFAULT_APP_FUNDING = 1_000_000


def account_from_signing_key(signing_key: SigningKey) -> tuple[AccountTransactionSigner, str]:
    """Algorand signer and address for an ed25519 signing key."""
    if not signing_key:
        raise ValueError("Signing key is required")

    public_key = bytes(signing_key.verify_key)
    private_key = base64.b64encode(bytes(signing_key) + public_key).decode('ascii')
    return AccountTransactionSigner(private_key), encoding.encode_address(public_key)


class _AlgorandApp:
    """Shared plumbing for a deployed Beaker application."""

    app: Application

    def __init__(self, algod_client: AlgodClient, app_id: int):
        if not algod_client:
            raise ValueError("Algod client is required")
        if app_id <= 0:
            raise ValueError("App ID must be positive")

        self.algod_client = algod_client
        self.app_id = app_id

    def _create_application_client(self, signing_key: SigningKey | None = None) -> ApplicationClient:
        if signing_key is None:
            return ApplicationClient(self.algod_client, app=self.app, app_id=self.app_id)

        signer, sender = account_from_signing_key(signing_key)
        return ApplicationClient(self.algod_client, app=self.app, app_id=self.app_id, signer=signer, sender=sender)

    def _submit(
        self,
        method: str,
        signing_key: SigningKey,
        box_names: list[bytes],
        gas: int | None,
        extra_outputs: Sequence[Any] | None,
        **kwargs: Any,
    ) -> str:
        """Call an application method and return the confirmed tx ID."""
        if gas is not None and gas < 0:
            raise ValueError("Gas must not be negative")

        client = self._create_application_client(signing_key)
        atc = AtomicTransactionComposer()
        for txn in extra_outputs or ():
            atc.add_transaction(txn)

        try:
            result = client.call(
                method,
                suggested_params=self._suggested_params(gas),
                boxes=[(self.app_id, name) for name in box_names],
                atc=atc,
                **kwargs,
            )
            transaction.wait_for_confirmation(self.algod_client, result.tx_id, 4)
        except Exception as e:
            raise LedgerError(f"{method} failed on app {self.app_id}: {e}") from e

        logger.debug("%s confirmed on app %d: %s", method, self.app_id, result.tx_id)
        return result.tx_id

    def _suggested_params(self, gas: int | None) -> transaction.SuggestedParams | None:
        """Suggested params with an extra flat fee of `gas` microAlgos."""
        if not gas:
            return None

        sp = self.algod_client.suggested_params()
        sp.flat_fee = True
        sp.fee = constants.MIN_TXN_FEE + gas
        return sp

    def _read_box(self, name: bytes) -> bytes | None:
        """Box contents, or None if the box does not exist."""
        try:
            response = self.algod_client.application_box_by_name(self.app_id, name)
        except AlgodHTTPError as e:
            if e.code == 404:
                return None
            raise LedgerError(f"Box read failed on app {self.app_id}: {e}") from e
        except Exception as e:
            raise LedgerError(f"Box read failed on app {self.app_id}: {e}") from e

        value = response['value']  # type: ignore[index]
        return base64.b64decode(value) if isinstance(value, str) else value


class AlgorandClaimLedger(_AlgorandApp):
    """ClaimLedger backed by the claim registry application."""

    app = claim_registry.app

    def get_schema_details(self, name: str) -> Schema:
        raw = self._read_box(ledger_key(claim_registry.SCHEMA_PREFIX, name))
        if raw is None:
            raise SchemaNotFoundError(name)
        return Schema(**json.loads(raw))

    def register_schema(
        self,
        schema: Schema,
        signing_key: SigningKey,
        gas: int | None = None,
        extra_outputs: Sequence[Any] | None = None,
    ) -> str:
        box_name = ledger_key(claim_registry.SCHEMA_PREFIX, schema.name)
        if self._read_box(box_name) is not None:
            raise SchemaExistsError(schema.name)

        definition = canonical_json(schema.definition()).decode('utf-8')
        return self._submit(
            "register_schema", signing_key, [box_name], gas, extra_outputs,
            name=schema.name, definition=definition,
        )

    def get_issuer_did(self) -> str:
        try:
            state = self._create_application_client().get_global_state()
        except Exception as e:
            raise LedgerError(f"Global state read failed on app {self.app_id}: {e}") from e

        issuer_did = state.get("issuer_did", "")
        return issuer_did.decode('utf-8') if isinstance(issuer_did, bytes) else str(issuer_did)

    def is_valid_claim(self, claim_id: str) -> bool:
        status = self._read_box(ledger_key(claim_registry.CLAIM_PREFIX, claim_id))
        return status == claim_registry.CLAIM_VALID

    def inject_claim(
        self,
        claim_id: str,
        signing_key: SigningKey,
        gas: int | None = None,
        extra_outputs: Sequence[Any] | None = None,
    ) -> str:
        box_name = ledger_key(claim_registry.CLAIM_PREFIX, claim_id)
        return self._submit("inject_claim", signing_key, [box_name], gas, extra_outputs, claim_id=claim_id)

    def revoke_claim(
        self,
        claim_id: str,
        signing_key: SigningKey,
        gas: int | None = None,
        extra_outputs: Sequence[Any] | None = None,
    ) -> str:
        box_name = ledger_key(claim_registry.CLAIM_PREFIX, claim_id)
        return self._submit("revoke_claim", signing_key, [box_name], gas, extra_outputs, claim_id=claim_id)


class AlgorandTrustLedger(_AlgorandApp):
    """TrustLedger backed by the Root of Trust application."""

    app = trust_registry.app

    def is_trusted(self, issuer_did: str, schema_name: str) -> bool:
        return self._read_box(self._trust_box(issuer_did, schema_name)) == trust_registry.TRUST_ACTIVE

    def register_issuer(
        self,
        issuer_did: str,
        schema_name: str,
        signing_key: SigningKey,
        gas: int | None = None,
        extra_outputs: Sequence[Any] | None = None,
    ) -> str:
        return self._submit(
            "register_issuer", signing_key, [self._trust_box(issuer_did, schema_name)], gas, extra_outputs,
            issuer_did=issuer_did, schema_name=schema_name,
        )

    def deactivate_issuer(
        self,
        issuer_did: str,
        schema_name: str,
        signing_key: SigningKey,
        gas: int | None = None,
        extra_outputs: Sequence[Any] | None = None,
    ) -> str:
        return self._submit(
            "deactivate_issuer", signing_key, [self._trust_box(issuer_did, schema_name)], gas, extra_outputs,
            issuer_did=issuer_did, schema_name=schema_name,
        )

    @staticmethod
    def _trust_box(issuer_did: str, schema_name: str) -> bytes:
        return ledger_key(trust_registry.TRUST_PREFIX, f"{issuer_did}|{schema_name}")


def algorand_trust_resolver(algod_client: AlgodClient) -> Callable[[Any], AlgorandTrustLedger]:
    """Resolver mapping a Root of Trust app ID to its ledger client."""
    return lambda app_id: AlgorandTrustLedger(algod_client, int(app_id))


def deploy_claim_registry(algod_client: AlgodClient, signing_key: SigningKey, funding: int = DEFAULT_APP_FUNDING) -> int:
    """Create a claim registry owned by signing_key and fund it for box storage."""
    signer, sender = account_from_signing_key(signing_key)
    client = ApplicationClient(algod_client, app=claim_registry.app, signer=signer, sender=sender)
    app_id, _, _ = client.create(issuer_did=generate_did_key(signing_key))
    if funding:
        client.fund(funding)
    logger.info("Deployed claim registry app %d for %s", app_id, sender)
    return app_id


def deploy_trust_registry(algod_client: AlgodClient, signing_key: SigningKey, funding: int = DEFAULT_APP_FUNDING) -> int:
    """Create a Root of Trust registry owned by signing_key and fund it."""
    signer, sender = account_from_signing_key(signing_key)
    client = ApplicationClient(algod_client, app=trust_registry.app, signer=signer, sender=sender)
    app_id, _, _ = client.create()
    if funding:
        client.fund(funding)
    logger.info("Deployed trust registry app %d for %s", app_id, sender)
    return app_id
