"""Test the Algorand ledger adapters.

Algod and the Beaker ApplicationClient are mocked; no LocalNet required.
"""

from __future__ import annotations

import base64
import json
from unittest.mock import Mock, patch

import pytest
from algosdk import account, constants
from algosdk.error import AlgodHTTPError
from nacl.signing import SigningKey

from credledger.contracts import claim_registry, trust_registry
from credledger.sdk.algorand import (
    AlgorandClaimLedger,
    AlgorandTrustLedger,
    account_from_signing_key,
    algorand_trust_resolver,
    deploy_claim_registry,
)
from credledger.sdk.did import generate_did_key
from credledger.sdk.errors import LedgerError, SchemaExistsError, SchemaNotFoundError
from credledger.sdk.hashing import ledger_key
from credledger.sdk.models import Schema


def _box(value: bytes) -> dict:
    return {"name": "", "value": base64.b64encode(value).decode("ascii")}


def _missing_box(*args, **kwargs):
    raise AlgodHTTPError("box not found", code=404)


@pytest.fixture
def algod() -> Mock:
    return Mock()


@pytest.fixture
def app_client():
    """Patched ApplicationClient whose calls return a fixed tx ID."""
    with patch("credledger.sdk.algorand.ApplicationClient") as client_cls, \
            patch("credledger.sdk.algorand.transaction.wait_for_confirmation"):
        client_cls.return_value.call.return_value = Mock(tx_id="TX123")
        yield client_cls


def test_account_from_signing_key() -> None:
    """The ed25519 key and the Algorand account share one keypair."""
    signing_key = SigningKey.generate()

    signer, address = account_from_signing_key(signing_key)

    assert address == account.address_from_private_key(signer.private_key)
    with pytest.raises(ValueError, match="Signing key is required"):
        account_from_signing_key(None)  # type: ignore[arg-type]


def test_ledger_init_validation(algod: Mock) -> None:
    with pytest.raises(ValueError, match="Algod client is required"):
        AlgorandClaimLedger(None, 1)  # type: ignore[arg-type]

    with pytest.raises(ValueError, match="App ID must be positive"):
        AlgorandClaimLedger(algod, 0)


def test_get_schema_details(algod: Mock) -> None:
    """Schema boxes hold the canonical JSON definition."""
    definition = {"name": "KYC", "attributes": ["firstName", "age"], "revocable": True}
    algod.application_box_by_name.return_value = _box(json.dumps(definition).encode())

    schema = AlgorandClaimLedger(algod, 7).get_schema_details("KYC")

    assert schema == Schema(**definition)
    algod.application_box_by_name.assert_called_once_with(7, ledger_key(claim_registry.SCHEMA_PREFIX, "KYC"))


def test_get_schema_details_not_found(algod: Mock) -> None:
    algod.application_box_by_name.side_effect = _missing_box

    with pytest.raises(SchemaNotFoundError):
        AlgorandClaimLedger(algod, 7).get_schema_details("KYC")


def test_box_read_failure_is_ledger_error(algod: Mock) -> None:
    """Anything other than a missing box is a ledger failure."""
    ledger = AlgorandClaimLedger(algod, 7)

    algod.application_box_by_name.side_effect = AlgodHTTPError("internal", code=500)
    with pytest.raises(LedgerError, match="Box read failed"):
        ledger.is_valid_claim("c1")

    algod.application_box_by_name.side_effect = ConnectionError("refused")
    with pytest.raises(LedgerError, match="refused"):
        ledger.is_valid_claim("c1")


def test_is_valid_claim(algod: Mock) -> None:
    ledger = AlgorandClaimLedger(algod, 7)

    algod.application_box_by_name.return_value = _box(claim_registry.CLAIM_VALID)
    assert ledger.is_valid_claim("c1") is True

    algod.application_box_by_name.return_value = _box(claim_registry.CLAIM_REVOKED)
    assert ledger.is_valid_claim("c1") is False

    algod.application_box_by_name.side_effect = _missing_box
    assert ledger.is_valid_claim("c1") is False


def test_get_issuer_did(algod: Mock, app_client: Mock) -> None:
    app_client.return_value.get_global_state.return_value = {"issuer_did": b"did:key:z6MkTest"}

    assert AlgorandClaimLedger(algod, 7).get_issuer_did() == "did:key:z6MkTest"


def test_get_issuer_did_failure(algod: Mock, app_client: Mock) -> None:
    app_client.return_value.get_global_state.side_effect = ConnectionError("refused")

    with pytest.raises(LedgerError, match="Global state read failed"):
        AlgorandClaimLedger(algod, 7).get_issuer_did()


def test_inject_claim(algod: Mock, app_client: Mock) -> None:
    """Writes reference the claim box and return the confirmed tx ID."""
    signing_key = SigningKey.generate()

    tx = AlgorandClaimLedger(algod, 7).inject_claim("c1", signing_key)

    assert tx == "TX123"
    _, kwargs = app_client.call_args
    assert kwargs["app_id"] == 7
    _, address = account_from_signing_key(signing_key)
    assert kwargs["sender"] == address

    method, call_kwargs = app_client.return_value.call.call_args
    assert method == ("inject_claim",)
    assert call_kwargs["claim_id"] == "c1"
    assert call_kwargs["boxes"] == [(7, ledger_key(claim_registry.CLAIM_PREFIX, "c1"))]
    assert call_kwargs["suggested_params"] is None


def test_gas_becomes_extra_fee(algod: Mock, app_client: Mock) -> None:
    AlgorandClaimLedger(algod, 7).revoke_claim("c1", SigningKey.generate(), gas=3000)

    sp = app_client.return_value.call.call_args.kwargs["suggested_params"]
    assert sp.flat_fee is True
    assert sp.fee == constants.MIN_TXN_FEE + 3000


def test_negative_gas_rejected(algod: Mock, app_client: Mock) -> None:
    with pytest.raises(ValueError, match="Gas must not be negative"):
        AlgorandClaimLedger(algod, 7).revoke_claim("c1", SigningKey.generate(), gas=-1)

    app_client.return_value.call.assert_not_called()


def test_extra_outputs_join_the_group(algod: Mock, app_client: Mock) -> None:
    """Extra transactions are grouped atomically with the app call."""
    payment = Mock()

    with patch("credledger.sdk.algorand.AtomicTransactionComposer") as atc_cls:
        AlgorandClaimLedger(algod, 7).inject_claim("c1", SigningKey.generate(), extra_outputs=[payment])

    atc_cls.return_value.add_transaction.assert_called_once_with(payment)
    assert app_client.return_value.call.call_args.kwargs["atc"] is atc_cls.return_value


def test_submit_failure_is_ledger_error(algod: Mock, app_client: Mock) -> None:
    app_client.return_value.call.side_effect = RuntimeError("logic eval error: assert failed")

    with pytest.raises(LedgerError, match="inject_claim failed on app 7"):
        AlgorandClaimLedger(algod, 7).inject_claim("c1", SigningKey.generate())


def test_register_schema(algod: Mock, app_client: Mock) -> None:
    """The stored definition is canonical JSON without the tx reference."""
    algod.application_box_by_name.side_effect = _missing_box
    schema = Schema(name="KYC", attributes=["firstName", "age"], revocable=True)

    tx = AlgorandClaimLedger(algod, 7).register_schema(schema, SigningKey.generate())

    assert tx == "TX123"
    call_kwargs = app_client.return_value.call.call_args.kwargs
    assert call_kwargs["name"] == "KYC"
    assert json.loads(call_kwargs["definition"]) == schema.definition()
    assert call_kwargs["boxes"] == [(7, ledger_key(claim_registry.SCHEMA_PREFIX, "KYC"))]


def test_register_schema_exists(algod: Mock, app_client: Mock) -> None:
    algod.application_box_by_name.return_value = _box(b'{"name":"KYC"}')
    schema = Schema(name="KYC", attributes=["firstName"], revocable=True)

    with pytest.raises(SchemaExistsError):
        AlgorandClaimLedger(algod, 7).register_schema(schema, SigningKey.generate())

    app_client.return_value.call.assert_not_called()


def test_trust_ledger(algod: Mock, app_client: Mock) -> None:
    """Trust boxes are keyed by the issuer DID and schema name."""
    ledger = AlgorandTrustLedger(algod, 9)
    box_name = ledger_key(trust_registry.TRUST_PREFIX, "did:example:issuer|KYC")

    algod.application_box_by_name.return_value = _box(trust_registry.TRUST_ACTIVE)
    assert ledger.is_trusted("did:example:issuer", "KYC") is True
    algod.application_box_by_name.assert_called_with(9, box_name)

    algod.application_box_by_name.return_value = _box(trust_registry.TRUST_INACTIVE)
    assert ledger.is_trusted("did:example:issuer", "KYC") is False

    ledger.deactivate_issuer("did:example:issuer", "KYC", SigningKey.generate())
    method, call_kwargs = app_client.return_value.call.call_args
    assert method == ("deactivate_issuer",)
    assert call_kwargs["boxes"] == [(9, box_name)]
    assert call_kwargs["schema_name"] == "KYC"


def test_algorand_trust_resolver(algod: Mock) -> None:
    resolve = algorand_trust_resolver(algod)

    ledger = resolve("42")

    assert isinstance(ledger, AlgorandTrustLedger)
    assert ledger.app_id == 42
    assert ledger.algod_client is algod


def test_deploy_claim_registry(algod: Mock, app_client: Mock) -> None:
    """The registry is created with the deployer's did:key and funded."""
    signing_key = SigningKey.generate()
    app_client.return_value.create.return_value = (101, "APPADDR", "TXID")

    app_id = deploy_claim_registry(algod, signing_key, funding=500_000)

    assert app_id == 101
    app_client.return_value.create.assert_called_once_with(issuer_did=generate_did_key(signing_key))
    app_client.return_value.fund.assert_called_once_with(500_000)
