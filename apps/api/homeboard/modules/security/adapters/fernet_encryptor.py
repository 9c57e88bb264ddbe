"""Encryption utilities for storing connection credentials."""
from cryptography.fernet import Fernet, InvalidToken

from homeboard.shared.infrastructure.settings import settings


class CredentialDecryptionError(ValueError):
    pass


class CredentialEncryption:
    """Encrypt/decrypt connection tokens."""

    def __init__(self, key: str | bytes | None = None):
        key = key or settings.encryption_key
        if not key:
            raise ValueError("ENCRYPTION_KEY not set in environment")
        self.cipher = Fernet(key.encode() if isinstance(key, str) else key)

    def encrypt(self, plaintext: str) -> str:
        """Encrypt a string."""
        return self.cipher.encrypt(plaintext.encode()).decode()

    def decrypt(self, ciphertext: str) -> str:
        """Decrypt a string."""
        try:
            return self.cipher.decrypt(ciphertext.encode()).decode()
        except InvalidToken as exc:
            raise CredentialDecryptionError("Credential ciphertext is invalid or was encrypted with another key") from exc


# Global instance
credential_encryptor = CredentialEncryption()
