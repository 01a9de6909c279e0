"""Secret encryption and decryption operations.

This module decides when sops has to run for a secret file and what
happens to its output: decrypted siblings are reused while fresh,
outputs are written atomically, and partial files never survive a
failed sops call.
"""

import contextlib
import shutil
from collections.abc import Callable
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import IO

import click
from icecream import ic

from helm_secrets import console
from helm_secrets.exceptions import (
    DecryptionError,
    EncryptionError,
    InvalidTargetError,
    SecretFileNotFoundError,
    SopsError,
)
from helm_secrets.models import DEFAULT_DEC_SUFFIX, DecryptResult, EncryptResult
from helm_secrets.secrets.classify import (
    decrypted_path,
    encrypted_path,
    is_decrypted_name,
    is_encrypted,
    is_fresh,
    is_secret_file,
)
from helm_secrets.secrets.sops import Sops


def _write_atomically(target: Path, write: Callable[[IO[bytes]], None]) -> None:
    """Produce ``target`` through a temporary file in the same directory.

    Args:
        target: Final destination; replaced only once ``write`` succeeds.
        write: Callable filling the temporary file.

    """
    temp_file = NamedTemporaryFile(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp", delete=False)
    temp_path = Path(temp_file.name)
    try:
        with temp_file:
            write(temp_file)
        if target.exists():
            shutil.copymode(target, temp_path)
        temp_path.replace(target)
    except BaseException:
        # Never leave partial plaintext or ciphertext behind
        with contextlib.suppress(OSError):
            temp_path.unlink(missing_ok=True)
        raise


def decrypt_secret(path: str | Path, *, sops: Sops, dec_suffix: str = DEFAULT_DEC_SUFFIX) -> DecryptResult:
    """Resolve a secret file to a path holding its plaintext.

    Files without sops metadata are returned unchanged. For encrypted files
    the decrypted sibling is reused when it is at least as recent as the
    source; otherwise sops decrypts into it.

    Args:
        path: Path of the (possibly) encrypted file.
        sops: The sops adapter to run.
        dec_suffix: Suffix used by decrypted siblings.

    Returns:
        DecryptResult whose ``decrypted`` flag is True only when the
        plaintext was written by this call.

    Raises:
        SecretFileNotFoundError: If ``path`` does not exist.
        DecryptionError: If sops fails; the partial output is removed.

    """
    source = Path(path)
    if not is_encrypted(source):
        console.step(f"Not encrypted: {console.highlight(str(source))}")
        return DecryptResult(path=source, decrypted=False)

    target = decrypted_path(source, dec_suffix)
    if is_fresh(target, source):
        console.step(f"{console.highlight(str(target))} is newer than {source}, reusing it")
        return DecryptResult(path=target, decrypted=False)

    console.step(f"Decrypting {console.highlight(str(source))}")
    try:
        _write_atomically(target, lambda output: sops.decrypt_to(source, output))
    except SopsError as err:
        raise DecryptionError(str(err)) from err

    ic(source, target)
    return DecryptResult(path=target, decrypted=True)


def encrypt_secret(path: str | Path, *, sops: Sops, dec_suffix: str = DEFAULT_DEC_SUFFIX) -> EncryptResult:
    """Encrypt a secret file, preferring a fresher decrypted sibling as source.

    Args:
        path: The canonical secret file, e.g. ``secrets.prod.yaml``.
        sops: The sops adapter to run.
        dec_suffix: Suffix used by decrypted siblings.

    Returns:
        EncryptResult describing the source, the target and whether
        anything was encrypted.

    Raises:
        InvalidTargetError: If ``path`` names a decrypted sibling or is not
            a secrets file.
        SecretFileNotFoundError: If neither ``path`` nor its sibling exists.
        EncryptionError: If sops fails; the target is left untouched.

    """
    target = Path(path)
    if is_decrypted_name(target, dec_suffix):
        canonical = encrypted_path(target, dec_suffix)
        raise InvalidTargetError(
            f"{target} is a decrypted file; encrypt {canonical} instead to update the canonical secret"
        )
    if not is_secret_file(target, dec_suffix):
        raise InvalidTargetError(
            f"{target} does not follow the secrets[.<name>].yaml naming convention; refusing to encrypt it"
        )

    sibling = decrypted_path(target, dec_suffix)
    if not target.exists() and not sibling.exists():
        raise SecretFileNotFoundError(f"File does not exist: {target}")

    source = sibling if is_fresh(sibling, target) else target
    ic(target, source)

    if is_encrypted(source):
        console.info(f"Already encrypted: {console.highlight(str(source))}")
        return EncryptResult(source=source, target=target, encrypted=False)

    try:
        _write_atomically(target, lambda output: sops.encrypt_to(source, output))
    except SopsError as err:
        raise EncryptionError(str(err)) from err

    if source == target:
        console.success(f"Encrypted {console.highlight(str(target))}")
    else:
        console.success(f"Encrypted {source} to {console.highlight(str(target))}")
    return EncryptResult(source=source, target=target, encrypted=True)


def view_secret(path: str | Path, *, sops: Sops) -> None:
    """Print the plaintext of a secret file without writing it to disk.

    Raises:
        SecretFileNotFoundError: If ``path`` does not exist.
        DecryptionError: If sops fails.

    """
    source = Path(path)
    if not source.is_file():
        raise SecretFileNotFoundError(f"File does not exist: {source}")
    try:
        sops.view(source)
    except SopsError as err:
        raise DecryptionError(str(err)) from err


def edit_secret(
    path: str | Path,
    *,
    sops: Sops,
    dec_suffix: str = DEFAULT_DEC_SUFFIX,
    editor: str | None = None,
) -> DecryptResult:
    """Decrypt a secret file and open the plaintext in an editor.

    The decrypted sibling is kept afterwards; re-encryption is a separate,
    explicit ``encrypt_secret`` call.

    Args:
        path: Path of the secret file.
        sops: The sops adapter to run.
        dec_suffix: Suffix used by decrypted siblings.
        editor: Editor command; click falls back to $VISUAL/$EDITOR.

    Returns:
        DecryptResult pointing at the edited plaintext.

    """
    result = decrypt_secret(path, sops=sops, dec_suffix=dec_suffix)
    console.action(f"Opening {console.highlight(str(result.path))} for editing")
    click.edit(filename=str(result.path), editor=editor)
    return result


def clean_decrypted(directory: str | Path, dec_suffix: str = DEFAULT_DEC_SUFFIX) -> list[Path]:
    """Recursively delete decrypted siblings under a directory.

    Args:
        directory: Root of the search.
        dec_suffix: Suffix used by decrypted siblings.

    Returns:
        The removed paths, in the order they were deleted.

    Raises:
        SecretFileNotFoundError: If ``directory`` does not exist.

    """
    root = Path(directory)
    if not root.exists():
        raise SecretFileNotFoundError(f"Directory does not exist: {root}")

    if root.is_file():
        candidates = [root] if root.name.endswith(dec_suffix) else []
    else:
        candidates = sorted(p for p in root.rglob(f"*{dec_suffix}") if p.is_file())

    removed: list[Path] = []
    for candidate in candidates:
        candidate.unlink()
        console.step(f"Removed {candidate}")
        removed.append(candidate)
    return removed
