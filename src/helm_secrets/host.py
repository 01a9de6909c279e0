"""Provisioning of the sops binary and the git diff driver.

sops is taken from PATH when available. Otherwise a pinned release is
downloaded from GitHub into the XDG data directory, one file per version,
and ``setup`` points the operator at it.
"""

import contextlib
import os
import platform
import re
import shutil
import stat
import subprocess
from pathlib import Path
from tempfile import NamedTemporaryFile

import requests
from icecream import ic

from helm_secrets import console
from helm_secrets.exceptions import BinaryNotFoundError, HelmSecretsError, UnsupportedPlatformError

_SEMVER_PATTERN = re.compile(r"^\d+\.\d+\.\d+(?:-[\w.]+)?(?:\+[\w.]+)?$")

# platform.machine() / platform.system() -> sops release asset naming
_SOPS_ARCHES = {"x86_64": "amd64", "AMD64": "amd64", "arm64": "arm64", "aarch64": "arm64"}
_SOPS_SYSTEMS = {"Linux": "linux", "Darwin": "darwin"}


def normalize_version(version: str) -> str:
    """Strip one leading 'v' from a release version and validate it.

    Args:
        version: A sops release, e.g. 'v3.9.1' or '3.9.1'.

    Returns:
        The bare version, e.g. '3.9.1'.

    Raises:
        ValueError: If the version is empty or not semantic.

    """
    normalized = version.removeprefix("v") if version else ""
    if not _SEMVER_PATTERN.match(normalized):
        raise ValueError(f"Invalid version format: '{version}' is not a semantic version such as 3.9.1")
    return normalized


class Host:
    """The machine sops runs on: its platform and its binary directory.

    Attributes:
        base_url: GitHub releases download root of sops.
        bin_location: Directory holding downloaded ``sops-<version>`` files.
        cpu_type: sops name of the CPU architecture (amd64 or arm64).
        system: sops name of the operating system (linux or darwin).

    """

    def __init__(self) -> None:
        self.base_url: str = "https://github.com/getsops/sops/releases/download"
        data_home = os.environ.get("XDG_DATA_HOME") or Path.home() / ".local" / "share"
        self.bin_location: Path = Path(data_home) / "helm-secrets" / "bin"
        self.cpu_type: str = self._get_cpu_type()
        self.system: str = self._get_system_type()

    @staticmethod
    def _get_cpu_type() -> str:
        """Map the CPU architecture to sops' release naming.

        Raises:
            UnsupportedPlatformError: If sops publishes no build for it.

        """
        machine = platform.machine()
        try:
            return _SOPS_ARCHES[machine]
        except KeyError:
            raise UnsupportedPlatformError(f"Unsupported CPU architecture: {machine}") from None

    @staticmethod
    def _get_system_type() -> str:
        """Map the operating system to sops' release naming.

        Raises:
            UnsupportedPlatformError: If sops publishes no build for it.

        """
        system = platform.system()
        try:
            return _SOPS_SYSTEMS[system]
        except KeyError:
            raise UnsupportedPlatformError(f"Unsupported operating system: {system}") from None

    def __repr__(self) -> str:
        """Return a detailed string representation for debugging."""
        return f"Host(platform={self.system}/{self.cpu_type}, bin_location={self.bin_location!r})"

    def release_url(self, version: str) -> str:
        """Return the download URL of a sops release binary for this host."""
        normalized = normalize_version(version)
        return f"{self.base_url}/v{normalized}/sops-v{normalized}.{self.system}.{self.cpu_type}"

    def get_binary_path(self, version: str) -> Path:
        """Return where release ``version`` is (or would be) stored."""
        normalized = normalize_version(version)
        return self.bin_location / f"sops-{normalized}"

    def _stream_to(self, url: str, target: Path, normalized: str) -> None:
        """Stream ``url`` into ``target`` through a temporary file in ``bin_location``."""
        with requests.get(url, timeout=60, stream=True) as response:
            if response.status_code == 404:
                raise BinaryNotFoundError(f"sops version {normalized} is not available for download")
            response.raise_for_status()
            total_size = int(response.headers.get("content-length", 0))

            temp_file = NamedTemporaryFile(dir=self.bin_location, prefix=".sops-", delete=False)
            temp_path = Path(temp_file.name)
            try:
                with console.create_download_progress() as progress, temp_file:
                    task = progress.add_task(f"sops v{normalized}", total=total_size)
                    for chunk in response.iter_content(chunk_size=8192):
                        if chunk:
                            temp_file.write(chunk)
                            progress.update(task, advance=len(chunk))
                temp_path.chmod(temp_path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
                temp_path.replace(target)
            except BaseException:
                with contextlib.suppress(OSError):
                    temp_path.unlink(missing_ok=True)
                raise

    def _download_sops_binary(self, version: str) -> None:
        """Stream a sops release into ``bin_location`` and mark it executable.

        The file only appears under its versioned name once complete; an
        interrupted download leaves nothing behind.

        Raises:
            BinaryNotFoundError: If GitHub has no such release asset or the
                download fails.
            ValueError: If the version is malformed.

        """
        normalized = normalize_version(version)
        url = self.release_url(normalized)
        ic(url)
        target = self.get_binary_path(normalized)
        console.action(f"Downloading sops v{normalized} for {self.system}/{self.cpu_type}")
        self.bin_location.mkdir(parents=True, exist_ok=True)

        try:
            self._stream_to(url, target, normalized)
        except requests.RequestException as err:
            raise BinaryNotFoundError(f"Failed to download sops v{normalized} from {url}: {err}") from err

        console.success(f"Installed sops v{normalized} to {console.highlight(str(target))}")

    def ensure_sops_binary(self, version: str) -> Path:
        """Return the path of a downloaded sops release, fetching it if missing."""
        binary_path = self.get_binary_path(version)
        if binary_path.exists():
            ic(binary_path)
        else:
            self._download_sops_binary(version)
        return binary_path


def resolve_sops_binary(binary: str, version: str) -> str:
    """Find a usable sops binary, downloading a release as a last resort.

    The host platform is only inspected when a download is needed, so an
    installed sops works on platforms without a sops release build.

    Args:
        binary: Configured sops name or path.
        version: Release to download if ``binary`` is not executable.

    Returns:
        The binary to run.

    Raises:
        UnsupportedPlatformError: If a download is needed but sops publishes
            no build for this platform.
        BinaryNotFoundError: If the release cannot be downloaded.

    """
    found = shutil.which(binary)
    if found is not None:
        return found
    console.warning(f"sops binary '{binary}' not found on PATH")
    downloaded = str(Host().ensure_sops_binary(version))
    console.info(f"Set {console.highlight(f'HELM_SECRETS_SOPS_BIN={downloaded}')} to use it by default")
    return downloaded


def configure_git_diff(sops_binary: str) -> None:
    """Register the ``sopsdiffer`` git diff driver globally.

    Repositories opting in with ``*.yaml diff=sopsdiffer`` in
    ``.gitattributes`` then show decrypted diffs of secret files.

    Raises:
        BinaryNotFoundError: If git is not installed.
        HelmSecretsError: If git rejects the configuration.

    """
    cmd = ["git", "config", "--global", "diff.sopsdiffer.textconv", f"{sops_binary} -d"]
    ic(cmd)
    try:
        subprocess.run(cmd, check=True)
    except FileNotFoundError as err:
        raise BinaryNotFoundError("git not found; install git to enable decrypted diffs") from err
    except subprocess.CalledProcessError as err:
        raise HelmSecretsError(f"Failed to configure git diff driver (exit code {err.returncode})") from err
    console.success(f"Configured git diff driver {console.highlight('sopsdiffer')}")
