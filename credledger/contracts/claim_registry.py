"""Claim registry smart contract - Beaker application.

Schema registry + claim status store for a single issuer.
Schemas live in boxes schema:<sha256(name)> holding the canonical JSON
definition; claims live in boxes claim:<sha256(claim_id)> holding a
one-byte status ("A" valid, "R" revoked). Only the creator may write.
"""

from beaker import Application, Authorize, GlobalStateValue
from pyteal import (
    abi,
    And,
    Assert,
    Bytes,
    BoxGet,
    BoxPut,
    Concat,
    Expr,
    Log,
    Not,
    Seq,
    Sha256,
    TealType,
)

SCHEMA_PREFIX = b"schema:"
CLAIM_PREFIX = b"claim:"
CLAIM_VALID = b"A"
CLAIM_REVOKED = b"R"


class ClaimRegistryState:
    issuer_did = GlobalStateValue(
        stack_type=TealType.bytes,
        descr="did:key of the issuer that controls this registry",
    )


app = Application(
    "ClaimRegistry",
    descr="Issuer schema registry and claim revocation state",
    state=ClaimRegistryState(),
)


def _schema_key(name: Expr) -> Expr:
    return Concat(Bytes(SCHEMA_PREFIX), Sha256(name))


def _claim_key(claim_id: Expr) -> Expr:
    return Concat(Bytes(CLAIM_PREFIX), Sha256(claim_id))


@app.create
def create(issuer_did: abi.String) -> Expr:
    """Deploy the registry bound to the issuer's DID."""
    return Seq(
        app.initialize_global_state(),
        app.state.issuer_did.set(issuer_did.get()),
    )


@app.external(authorize=Authorize.only_creator())
def register_schema(name: abi.String, definition: abi.String) -> Expr:
    """Store a new schema definition. Fails if the name is taken."""
    existing = BoxGet(_schema_key(name.get()))
    return Seq(
        existing,
        Assert(Not(existing.hasValue())),
        BoxPut(_schema_key(name.get()), definition.get()),
        Log(Concat(Bytes("SchemaRegistered:"), name.get())),
    )


@app.external(authorize=Authorize.only_creator())
def inject_claim(claim_id: abi.String) -> Expr:
    """Record a newly issued claim as valid. Claim IDs are single-use."""
    existing = BoxGet(_claim_key(claim_id.get()))
    return Seq(
        existing,
        Assert(Not(existing.hasValue())),
        BoxPut(_claim_key(claim_id.get()), Bytes(CLAIM_VALID)),
        Log(Concat(Bytes("ClaimIssued:"), claim_id.get())),
    )


@app.external(authorize=Authorize.only_creator())
def revoke_claim(claim_id: abi.String) -> Expr:
    """Flip a valid claim to revoked. Revocation is one-way."""
    existing = BoxGet(_claim_key(claim_id.get()))
    return Seq(
        existing,
        Assert(existing.hasValue()),
        Assert(existing.value() == Bytes(CLAIM_VALID)),
        BoxPut(_claim_key(claim_id.get()), Bytes(CLAIM_REVOKED)),
        Log(Concat(Bytes("ClaimRevoked:"), claim_id.get())),
    )


@app.external(read_only=True)
def is_valid_claim(claim_id: abi.String, *, output: abi.Bool) -> Expr:
    existing = BoxGet(_claim_key(claim_id.get()))
    return Seq(
        existing,
        output.set(And(existing.hasValue(), existing.value() == Bytes(CLAIM_VALID))),
    )


@app.external(read_only=True)
def get_schema_details(name: abi.String, *, output: abi.String) -> Expr:
    existing = BoxGet(_schema_key(name.get()))
    return Seq(
        existing,
        Assert(existing.hasValue()),
        output.set(existing.value()),
    )


@app.external(read_only=True)
def get_issuer_did(*, output: abi.String) -> Expr:
    return output.set(app.state.issuer_did.get())


def get_app() -> Application:
    """Get the claim registry Beaker application."""
    return app
