"""Shared test fixtures for helm-secrets tests."""

import base64
import os
from pathlib import Path
from typing import IO

import pytest
import yaml

from helm_secrets.exceptions import SopsError


class FakeSops:
    """Stand-in for the sops adapter.

    "Encryption" base64-wraps the plaintext in a YAML document carrying a
    ``sops`` metadata block, which is all the classifier looks for.
    """

    binary = "fake-sops"

    def __init__(self) -> None:
        self.calls: list[tuple[str, Path]] = []
        self.fail_with: SopsError | None = None

    def _maybe_fail(self, output: IO[bytes]) -> None:
        if self.fail_with is not None:
            output.write(b"partial output")
            raise self.fail_with

    def decrypt_to(self, source: Path, output: IO[bytes]) -> None:
        self.calls.append(("decrypt", Path(source)))
        self._maybe_fail(output)
        document = yaml.safe_load(Path(source).read_text())
        output.write(base64.b64decode(document["data"]))

    def encrypt_to(self, source: Path, output: IO[bytes]) -> None:
        self.calls.append(("encrypt", Path(source)))
        self._maybe_fail(output)
        output.write(encrypt_bytes(Path(source).read_bytes()))

    def view(self, source: Path) -> None:
        self.calls.append(("view", Path(source)))
        if self.fail_with is not None:
            raise self.fail_with

    def version(self) -> str:
        return "sops 3.9.1 (fake)"


def encrypt_bytes(plaintext: bytes) -> bytes:
    """Return the FakeSops ciphertext of ``plaintext``."""
    document = {
        "data": base64.b64encode(plaintext).decode(),
        "sops": {"version": "3.9.1", "mac": "ENC[AES256_GCM,data:fake]"},
    }
    return yaml.safe_dump(document).encode()


def set_mtime(path: Path, mtime: float) -> None:
    """Set both access and modification time of ``path``."""
    os.utime(path, (mtime, mtime))


@pytest.fixture
def fake_sops():
    """A FakeSops instance recording its calls."""
    return FakeSops()


@pytest.fixture
def plaintext():
    """Sample plaintext secret values."""
    return b"database:\n  password: hunter2\n"


@pytest.fixture
def encrypted_secret(tmp_path, plaintext):
    """An encrypted secrets.prod.yaml with no decrypted sibling."""
    path = tmp_path / "secrets.prod.yaml"
    path.write_bytes(encrypt_bytes(plaintext))
    set_mtime(path, 1_700_000_000)
    return path


@pytest.fixture
def plain_values(tmp_path):
    """A plain values.yaml that is not a secret."""
    path = tmp_path / "values.yaml"
    path.write_text("replicaCount: 2\n")
    return path


@pytest.fixture
def sample_sops_yaml():
    """Sample sops-encrypted YAML content."""
    return """database:
    password: ENC[AES256_GCM,data:bG9s,iv:abc=,tag:def=,type:str]
sops:
    kms: []
    age:
        - recipient: age1qyqszqgpqyqszqgpqyqszqgpqyqszqgpqyqszqgpqyqszqgpqyqs3290gq
    lastmodified: "2024-01-01T00:00:00Z"
    mac: ENC[AES256_GCM,data:xyz,iv:abc=,tag:def=,type:str]
    version: 3.9.1
"""
