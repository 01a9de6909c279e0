"""helm-secrets: transparent sops decryption around helm commands.

This package decrypts sops-encrypted ``secrets[.*].yaml`` values files
before helm reads them and removes the plaintext afterwards. It also
offers encrypt, decrypt, view, edit and clean operations on secret files.

Example usage:
    from helm_secrets import HelmSecrets, Settings

    helm_secrets = HelmSecrets(Settings(assume_yes=True))
    helm_secrets.decrypt("secrets.prod.yaml")
    helm_secrets.forward("upgrade", ["app", "./chart", "-f", "secrets.prod.yaml"])
"""

__version__ = "0.3.0"

from helm_secrets.core.helm_secrets import HelmSecrets
from helm_secrets.exceptions import (
    ArgumentParsingError,
    BinaryNotFoundError,
    DecryptionError,
    EncryptionError,
    HelmSecretsError,
    InvalidTargetError,
    SecretFileNotFoundError,
    SopsError,
    UnsupportedModeError,
    UnsupportedPlatformError,
)
from helm_secrets.models import DecryptResult, EncryptResult, Settings

__all__ = [
    # Version
    "__version__",
    # Classes
    "HelmSecrets",
    "Settings",
    "DecryptResult",
    "EncryptResult",
    # Exceptions
    "HelmSecretsError",
    "ArgumentParsingError",
    "BinaryNotFoundError",
    "DecryptionError",
    "EncryptionError",
    "InvalidTargetError",
    "SecretFileNotFoundError",
    "SopsError",
    "UnsupportedModeError",
    "UnsupportedPlatformError",
]
