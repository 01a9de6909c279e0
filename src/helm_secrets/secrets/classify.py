"""Secret file classification and naming conventions.

This module decides whether a file holds sops-encrypted content and maps
secret files to their decrypted siblings. Nothing here writes to disk.
"""

import re
from pathlib import Path
from typing import Any

import yaml
from icecream import ic

from helm_secrets.exceptions import HelmSecretsError, SecretFileNotFoundError
from helm_secrets.models import DEFAULT_DEC_SUFFIX

# secrets.yaml, secrets.prod.yaml; never secrets.prod.dec.yaml
_SECRET_NAME_PATTERN = re.compile(r"^secrets(\.[^.]+)?\.yaml$")

# dotenv and INI files carry sops metadata as flat keys
_FLAT_VERSION_PATTERN = re.compile(r"^\s*sops_version\s*=", re.MULTILINE)


def _has_sops_metadata(document: Any) -> bool:
    """Check a parsed document for a ``sops`` block with a version key."""
    if not isinstance(document, dict):
        return False
    metadata = document.get("sops")
    return isinstance(metadata, dict) and "version" in metadata


def is_encrypted(path: str | Path) -> bool:
    """Check whether a file holds sops-encrypted content.

    The file is parsed as YAML (which also covers JSON). It counts as
    encrypted when any document has a ``sops`` mapping with a ``version``
    field. Content without any YAML mapping is scanned for the flat
    ``sops_version`` key sops uses for dotenv and INI files. The file
    extension is never consulted.

    Args:
        path: Path to the file to inspect.

    Returns:
        True if sops metadata is present.

    Raises:
        SecretFileNotFoundError: If the file does not exist.
        HelmSecretsError: If the file exists but cannot be read.

    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8", errors="replace")
    except (FileNotFoundError, IsADirectoryError) as err:
        raise SecretFileNotFoundError(f"File does not exist: {path}") from err
    except OSError as err:
        raise HelmSecretsError(f"Cannot read {path}: {err.strerror or err}") from err

    try:
        mappings = [doc for doc in yaml.safe_load_all(content) if isinstance(doc, dict)]
    except yaml.YAMLError:
        mappings = []

    if mappings:
        encrypted = any(_has_sops_metadata(doc) for doc in mappings)
    else:
        # dotenv lines parse as one plain YAML scalar, so fall back here too
        encrypted = bool(_FLAT_VERSION_PATTERN.search(content))
    ic(path, encrypted)
    return encrypted


def is_secret_file(path: str | Path, dec_suffix: str = DEFAULT_DEC_SUFFIX) -> bool:
    """Check whether a path follows the secrets naming convention.

    Args:
        path: Path to check; only its basename matters.
        dec_suffix: Suffix used by decrypted siblings, which never match.

    Returns:
        True for names like ``secrets.yaml`` or ``secrets.prod.yaml``.

    """
    name = Path(path).name
    if name.endswith(dec_suffix):
        return False
    return bool(_SECRET_NAME_PATTERN.match(name))


def is_decrypted_name(path: str | Path, dec_suffix: str = DEFAULT_DEC_SUFFIX) -> bool:
    """Check whether a path names a decrypted sibling."""
    return Path(path).name.endswith(dec_suffix)


def decrypted_path(path: str | Path, dec_suffix: str = DEFAULT_DEC_SUFFIX) -> Path:
    """Derive the decrypted sibling path of a secret file.

    A trailing ``.yaml`` is replaced with the decrypted suffix; any other
    name gets the suffix appended.

    Args:
        path: Path of the encrypted file.
        dec_suffix: Suffix used by decrypted siblings.

    Returns:
        The sibling path, e.g. ``secrets.prod.dec.yaml``.

    """
    path = Path(path)
    name = path.name
    if name.endswith(".yaml"):
        name = name[: -len(".yaml")]
    return path.with_name(name + dec_suffix)


def encrypted_path(path: str | Path, dec_suffix: str = DEFAULT_DEC_SUFFIX) -> Path:
    """Derive the canonical encrypted path from a decrypted sibling path."""
    path = Path(path)
    name = path.name
    if name.endswith(dec_suffix):
        name = name[: -len(dec_suffix)] + ".yaml"
    return path.with_name(name)


def is_fresh(derived: Path, source: Path) -> bool:
    """Check whether ``derived`` exists and is at least as recent as ``source``.

    Args:
        derived: The decrypted sibling.
        source: The encrypted file it was produced from.

    Returns:
        True if ``derived`` exists and its mtime is not older than the
        source's (a missing source makes any existing sibling fresh).

    """
    try:
        derived_mtime = derived.stat().st_mtime
    except FileNotFoundError:
        return False
    try:
        source_mtime = source.stat().st_mtime
    except FileNotFoundError:
        return True
    return derived_mtime >= source_mtime
