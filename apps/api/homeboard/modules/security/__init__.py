from homeboard.modules.security.adapters.fernet_encryptor import CredentialDecryptionError
from homeboard.modules.security.adapters.fernet_vault import FernetSecretsVaultAdapter
from homeboard.modules.security.domain.ports import SecretsVaultPort

__all__ = ["CredentialDecryptionError", "FernetSecretsVaultAdapter", "SecretsVaultPort"]
