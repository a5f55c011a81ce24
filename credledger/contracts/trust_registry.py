"""Root of Trust smart contract - Beaker application.

Stores one box per (issuer DID, schema name) pair:
trust:<sha256(issuer_did | schema_name)> -> "1" active / "0" inactive.
Only the creator (the trust anchor) may toggle entries.
"""

from beaker import Application, Authorize
from pyteal import (
    abi,
    And,
    Bytes,
    BoxGet,
    BoxPut,
    Concat,
    Expr,
    Log,
    Seq,
    Sha256,
)

TRUST_PREFIX = b"trust:"
TRUST_ACTIVE = b"1"
TRUST_INACTIVE = b"0"

app = Application(
    "TrustRegistry",
    descr="Root of Trust: issuers authorized per schema",
)


def _trust_key(issuer_did: Expr, schema_name: Expr) -> Expr:
    # DID syntax excludes "|", so the concatenation is unambiguous
    return Concat(Bytes(TRUST_PREFIX), Sha256(Concat(issuer_did, Bytes("|"), schema_name)))


@app.external(authorize=Authorize.only_creator())
def register_issuer(issuer_did: abi.String, schema_name: abi.String) -> Expr:
    return Seq(
        BoxPut(_trust_key(issuer_did.get(), schema_name.get()), Bytes(TRUST_ACTIVE)),
        Log(Concat(Bytes("IssuerRegistered:"), issuer_did.get())),
    )


@app.external(authorize=Authorize.only_creator())
def deactivate_issuer(issuer_did: abi.String, schema_name: abi.String) -> Expr:
    return Seq(
        BoxPut(_trust_key(issuer_did.get(), schema_name.get()), Bytes(TRUST_INACTIVE)),
        Log(Concat(Bytes("IssuerDeactivated:"), issuer_did.get())),
    )


@app.external(read_only=True)
def is_trusted(issuer_did: abi.String, schema_name: abi.String, *, output: abi.Bool) -> Expr:
    existing = BoxGet(_trust_key(issuer_did.get(), schema_name.get()))
    return Seq(
        existing,
        output.set(And(existing.hasValue(), existing.value() == Bytes(TRUST_ACTIVE))),
    )


def get_app() -> Application:
    """Get the Root of Trust Beaker application."""
    return app
