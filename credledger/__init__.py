"""Decentralized-identity claims: schema registry, issuance, revocation and trust."""

__version__ = "0.1.0"
