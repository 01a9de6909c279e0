"""Tests for secrets/sops.py module."""

import io
import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from helm_secrets.exceptions import BinaryNotFoundError, SopsError
from helm_secrets.secrets.sops import Sops


class TestSops:
    """Tests for Sops class."""

    @patch("helm_secrets.secrets.sops.subprocess.run")
    def test_decrypt_to(self, mock_run):
        """Test decryption writes to the given output."""
        output = io.BytesIO()

        Sops("sops").decrypt_to(Path("secrets.yaml"), output)

        mock_run.assert_called_once_with(
            ["sops", "--decrypt", "secrets.yaml"],
            stdout=output,
            stderr=subprocess.PIPE,
            check=True,
        )

    @patch("helm_secrets.secrets.sops.subprocess.run")
    def test_encrypt_to(self, mock_run):
        """Test encryption uses --encrypt."""
        output = io.BytesIO()

        Sops("/opt/sops").encrypt_to(Path("secrets.dec.yaml"), output)

        assert mock_run.call_args[0][0] == ["/opt/sops", "--encrypt", "secrets.dec.yaml"]

    @patch("helm_secrets.secrets.sops.subprocess.run")
    def test_view_inherits_stdout(self, mock_run):
        """Test view leaves stdout attached to the terminal."""
        Sops().view(Path("secrets.yaml"))

        assert mock_run.call_args[1]["stdout"] is None

    @patch("helm_secrets.secrets.sops.subprocess.run")
    def test_failure_carries_stderr(self, mock_run):
        """Test a non-zero exit becomes SopsError with sops' message."""
        mock_run.side_effect = subprocess.CalledProcessError(128, ["sops"], stderr=b"Failed to get the data key\n")

        with pytest.raises(SopsError) as exc_info:
            Sops().decrypt_to(Path("secrets.yaml"), io.BytesIO())

        assert exc_info.value.returncode == 128
        assert exc_info.value.stderr == "Failed to get the data key"
        assert "secrets.yaml" in str(exc_info.value)
        assert "Failed to get the data key" in str(exc_info.value)

    @patch("helm_secrets.secrets.sops.subprocess.run")
    def test_missing_binary(self, mock_run):
        """Test a missing sops binary raises BinaryNotFoundError."""
        mock_run.side_effect = FileNotFoundError()

        with pytest.raises(BinaryNotFoundError) as exc_info:
            Sops("sops-missing").view(Path("secrets.yaml"))

        assert "sops-missing" in str(exc_info.value)

    @patch("helm_secrets.secrets.sops.subprocess.run")
    def test_version(self, mock_run):
        """Test the first line of sops --version is returned."""
        mock_run.return_value = MagicMock(stdout="sops 3.9.1 (latest)\nextra\n")

        assert Sops().version() == "sops 3.9.1 (latest)"

    @patch("helm_secrets.secrets.sops.subprocess.run")
    def test_version_missing_binary(self, mock_run):
        """Test version fails when sops is not installed."""
        mock_run.side_effect = FileNotFoundError()

        with pytest.raises(BinaryNotFoundError):
            Sops().version()

    def test_repr(self):
        """Test the debugging representation."""
        assert repr(Sops("/usr/bin/sops")) == "Sops(binary='/usr/bin/sops')"
