from __future__ import annotations

from typing import Protocol


class SecretsVaultPort(Protocol):
    """Symmetric cipher for connection tokens stored inside tenant config rows."""

    def encrypt(self, plaintext: str) -> str:
        raise NotImplementedError

    def decrypt(self, ciphertext: str) -> str:
        """Raises CredentialDecryptionError when the ciphertext was not produced by this vault's key."""
        raise NotImplementedError
