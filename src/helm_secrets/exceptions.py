"""Custom exceptions for helm-secrets.

This module defines the exception hierarchy used throughout the application
to provide meaningful error messages and proper error handling.
"""


class HelmSecretsError(Exception):
    """Base exception for all helm-secrets errors.

    All custom exceptions in this package inherit from this class,
    allowing callers to catch all helm-secrets errors with a single
    except clause if desired.
    """

    pass


class SecretFileNotFoundError(HelmSecretsError):
    """Raised when a referenced secret file does not exist.

    The message always names the missing path.
    """

    pass


class DecryptionError(HelmSecretsError):
    """Raised when sops fails to decrypt a secret file.

    Any partial plaintext output has already been removed by the time
    this is raised.
    """

    pass


class EncryptionError(HelmSecretsError):
    """Raised when sops fails to encrypt a secret file."""

    pass


class InvalidTargetError(HelmSecretsError):
    """Raised when encryption is requested against a decrypted sibling.

    Re-encryption must target the canonical ``*.yaml`` name, never the
    ``*.dec.yaml`` variant.
    """

    pass


class UnsupportedModeError(HelmSecretsError):
    """Raised when a forwarding command has no known flag grammar."""

    pass


class ArgumentParsingError(HelmSecretsError):
    """Raised when forwarded arguments do not fit the command's grammar.

    This can occur when:
    - An option is not part of the command's grammar
    - An option requiring a value is the last argument
    - Required positional arguments (release, chart) are missing
    """

    pass


class SopsError(HelmSecretsError):
    """Raised when the sops binary exits with a non-zero status.

    Attributes:
        returncode: The exit status reported by sops.
        stderr: Whatever sops wrote to standard error, stripped.

    """

    def __init__(self, message: str, *, returncode: int = 1, stderr: str = "") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class BinaryNotFoundError(HelmSecretsError):
    """Raised when a required binary (sops, helm, git) is not found.

    This can occur when:
    - The binary is not installed
    - The binary is not in the system PATH
    - The requested sops release cannot be downloaded
    """

    pass


class UnsupportedPlatformError(HelmSecretsError):
    """Raised when the current platform has no sops release build.

    helm-secrets can provision sops for:
    - Operating systems: Linux, macOS (Darwin)
    - CPU architectures: x86_64 (amd64), arm64
    """

    pass
