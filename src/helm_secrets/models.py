"""Data models for helm-secrets.

This module provides type-safe data structures for the application:
settings, decrypt/encrypt results and forwarded command grammars.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple

DEFAULT_DEC_SUFFIX = ".dec.yaml"
DEFAULT_SOPS_VERSION = "3.9.1"


class DecryptResult(NamedTuple):
    """Outcome of resolving a secret file to a usable plaintext path.

    Attributes:
        path: Path holding plaintext content (may be the input path itself).
        decrypted: True only if sops produced ``path`` during this call,
            meaning the caller owns its cleanup.

    """

    path: Path
    decrypted: bool


class EncryptResult(NamedTuple):
    """Outcome of an encryption request.

    Attributes:
        source: The file whose plaintext was (or would have been) encrypted.
        target: The canonical encrypted file.
        encrypted: False when the source was already encrypted.

    """

    source: Path
    target: Path
    encrypted: bool


@dataclass(frozen=True, slots=True)
class Settings:
    """Resolved runtime configuration.

    Attributes:
        sops_binary: Name or path of the sops executable.
        helm_binary: Name or path of the helm executable.
        dec_suffix: Suffix replacing ``.yaml`` for decrypted siblings.
        assume_yes: Skip the interactive confirmation before running helm.

    """

    sops_binary: str = "sops"
    helm_binary: str = "helm"
    dec_suffix: str = DEFAULT_DEC_SUFFIX
    assume_yes: bool = False


@dataclass(frozen=True, slots=True)
class FlagGrammar:
    """Option schema of a forwarded helm command.

    Attributes:
        name: The wrapper sub-command name.
        helm_command: Words passed to helm before the forwarded arguments.
        short_with_value: Single-letter options that take a value.
        short_flags: Single-letter boolean options.
        long_with_value: Long options that take a value.
        long_flags: Long boolean options.
        file_flags: Options whose value is a values file reference.
        min_positionals: Minimum number of positional arguments.

    """

    name: str
    helm_command: tuple[str, ...]
    short_with_value: frozenset[str] = frozenset()
    short_flags: frozenset[str] = frozenset()
    long_with_value: frozenset[str] = frozenset()
    long_flags: frozenset[str] = frozenset()
    file_flags: frozenset[str] = frozenset({"-f", "--values"})
    min_positionals: int = 0

