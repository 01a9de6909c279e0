"""Adapter around the sops binary.

This module only knows how to invoke sops; deciding when to encrypt or
decrypt and where the output goes is left to the callers.
"""

import subprocess
from pathlib import Path
from typing import IO

from icecream import ic

from helm_secrets.exceptions import BinaryNotFoundError, SopsError

# Error message constants
_ERR_SOPS_NOT_FOUND = "sops binary '{binary}' not found; run 'helm-secrets setup' or install sops on PATH"
_ERR_SOPS_FAILED = "sops {operation} failed for {path} (exit code {code}){details}"


class Sops:
    """Runs sops sub-commands against files on disk.

    Attributes:
        binary: Name or path of the sops executable.

    """

    def __init__(self, binary: str = "sops") -> None:
        self.binary = binary

    def __repr__(self) -> str:
        """Return a detailed string representation for debugging."""
        return f"Sops(binary={self.binary!r})"

    def _run(self, args: list[str], path: Path, operation: str, *, stdout: IO[bytes] | None = None) -> None:
        """Run sops, capturing stderr for error reporting.

        Args:
            args: Arguments passed after the binary.
            path: The file being processed (for error messages).
            operation: Human-readable operation name (for error messages).
            stdout: Where sops writes its output; inherited when None.

        Raises:
            BinaryNotFoundError: If the sops binary cannot be executed.
            SopsError: If sops exits with a non-zero status.

        """
        cmd = [self.binary, *args]
        ic(cmd)
        try:
            subprocess.run(cmd, stdout=stdout, stderr=subprocess.PIPE, check=True)
        except FileNotFoundError as err:
            raise BinaryNotFoundError(_ERR_SOPS_NOT_FOUND.format(binary=self.binary)) from err
        except subprocess.CalledProcessError as err:
            stderr_msg = err.stderr.decode(errors="replace").strip() if err.stderr else ""
            details = f" - {stderr_msg}" if stderr_msg else ""
            raise SopsError(
                _ERR_SOPS_FAILED.format(operation=operation, path=path, code=err.returncode, details=details),
                returncode=err.returncode,
                stderr=stderr_msg,
            ) from err

    def decrypt_to(self, source: Path, output: IO[bytes]) -> None:
        """Decrypt ``source`` and write the plaintext to ``output``."""
        self._run(["--decrypt", str(source)], source, "decrypt", stdout=output)

    def encrypt_to(self, source: Path, output: IO[bytes]) -> None:
        """Encrypt ``source`` and write the ciphertext to ``output``."""
        self._run(["--encrypt", str(source)], source, "encrypt", stdout=output)

    def view(self, source: Path) -> None:
        """Decrypt ``source`` straight to the terminal without touching disk."""
        self._run(["--decrypt", str(source)], source, "decrypt")

    def version(self) -> str:
        """Return the first line of ``sops --version``.

        Raises:
            BinaryNotFoundError: If the sops binary cannot be executed.

        """
        try:
            result = subprocess.run(
                [self.binary, "--version"],
                capture_output=True,
                text=True,
                check=True,
            )
        except (FileNotFoundError, subprocess.CalledProcessError) as err:
            raise BinaryNotFoundError(_ERR_SOPS_NOT_FOUND.format(binary=self.binary)) from err
        lines = result.stdout.strip().splitlines()
        return lines[0] if lines else ""
