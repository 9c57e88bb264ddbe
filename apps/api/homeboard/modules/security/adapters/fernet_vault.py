from __future__ import annotations

from homeboard.modules.security.adapters.fernet_encryptor import CredentialEncryption, credential_encryptor
from homeboard.modules.security.domain.ports import SecretsVaultPort


class FernetSecretsVaultAdapter(SecretsVaultPort):
    """Vault adapter backed by the Fernet encryption key from env."""

    def __init__(self, encryptor: CredentialEncryption | None = None) -> None:
        self._encryptor = encryptor or credential_encryptor

    def encrypt(self, plaintext: str) -> str:
        return self._encryptor.encrypt(plaintext)

    def decrypt(self, ciphertext: str) -> str:
        return self._encryptor.decrypt(ciphertext)
