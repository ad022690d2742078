"""
Submitting identities.

A submitting identity is the address a ledger operation is attributed to.
Addresses are derived from Ed25519 public keys; the ledger itself only ever
sees the address string. Key custody is left to the caller.
"""

import hashlib
from dataclasses import dataclass
from pathlib import Path

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519

ADDRESS_BYTES = 20


def address_from_public_key(public_key: ed25519.Ed25519PublicKey) -> str:
    """
    Derive an address from an Ed25519 public key.

    The address is "0x" followed by the hex of the last 20 bytes of
    SHA256(raw public key).
    """
    raw = public_key.public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )
    return "0x" + hashlib.sha256(raw).digest()[-ADDRESS_BYTES:].hex()


@dataclass(frozen=True)
class Identity:
    """An address plus the public key it was derived from."""

    address: str
    public_key: ed25519.Ed25519PublicKey

    def __str__(self) -> str:
        return self.address

    @classmethod
    def from_public_key(cls, public_key: ed25519.Ed25519PublicKey) -> "Identity":
        return cls(address=address_from_public_key(public_key), public_key=public_key)

    @classmethod
    def from_pem(cls, pem_string: str) -> "Identity":
        """
        Load an identity from a PEM-encoded Ed25519 public or private key.

        Raises:
            TypeError: If the key is not Ed25519
        """
        data = pem_string.encode()
        if b"PRIVATE KEY" in data:
            private_key = serialization.load_pem_private_key(data, password=None)
            if not isinstance(private_key, ed25519.Ed25519PrivateKey):
                raise TypeError(
                    f"Expected Ed25519 private key, got {type(private_key).__name__}"
                )
            return cls.from_public_key(private_key.public_key())

        public_key = serialization.load_pem_public_key(data)
        if not isinstance(public_key, ed25519.Ed25519PublicKey):
            raise TypeError(f"Expected Ed25519 public key, got {type(public_key).__name__}")
        return cls.from_public_key(public_key)

    @classmethod
    def from_pem_file(cls, path: str | Path) -> "Identity":
        return cls.from_pem(Path(path).read_text())

    @classmethod
    def generate(cls) -> tuple["Identity", ed25519.Ed25519PrivateKey]:
        """Generate a new keypair, returning (identity, private_key)."""
        private_key = ed25519.Ed25519PrivateKey.generate()
        return cls.from_public_key(private_key.public_key()), private_key

    def public_key_pem(self) -> str:
        return self.public_key.public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        ).decode()
