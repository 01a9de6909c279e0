"""HelmSecrets facade class.

This module provides the HelmSecrets class which serves as the main entry
point for all secret and forwarding operations, binding the configured
settings to the specialized modules.
"""

from collections.abc import Sequence
from pathlib import Path

from helm_secrets import console
from helm_secrets.forwarding.grammar import GrammarProvider
from helm_secrets.forwarding.wrapper import Forwarder, HelmRunner, run_helm
from helm_secrets.host import configure_git_diff, resolve_sops_binary
from helm_secrets.models import DEFAULT_SOPS_VERSION, DecryptResult, EncryptResult, Settings
from helm_secrets.prompts import ConfirmPolicy, auto_confirm, interactive_confirm
from helm_secrets.secrets.crypt import (
    clean_decrypted,
    decrypt_secret,
    edit_secret,
    encrypt_secret,
    view_secret,
)
from helm_secrets.secrets.sops import Sops


class HelmSecrets:
    """Secret file operations and helm forwarding for one configuration.

    Attributes:
        settings: Resolved runtime configuration.
        sops: Adapter for the configured sops binary.
        forwarder: Forwarder running wrapped helm commands.

    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        sops: Sops | None = None,
        grammars: GrammarProvider | None = None,
        confirm: ConfirmPolicy | None = None,
        runner: HelmRunner = run_helm,
    ) -> None:
        """Initialize HelmSecrets.

        Args:
            settings: Runtime configuration; defaults apply when None.
            sops: sops adapter; built from ``settings.sops_binary`` when None.
            grammars: Flag grammar source for forwarded commands.
            confirm: Confirmation policy; derived from ``settings.assume_yes``
                when None.
            runner: Callable executing helm.

        """
        self.settings: Settings = settings if settings is not None else Settings()
        self.sops: Sops = sops if sops is not None else Sops(self.settings.sops_binary)
        if confirm is None:
            confirm = auto_confirm if self.settings.assume_yes else interactive_confirm
        self.forwarder: Forwarder = Forwarder(
            sops=self.sops,
            grammars=grammars,
            confirm=confirm,
            helm_binary=self.settings.helm_binary,
            dec_suffix=self.settings.dec_suffix,
            runner=runner,
        )

    def __repr__(self) -> str:
        """Return a detailed string representation for debugging."""
        return f"HelmSecrets(settings={self.settings!r})"

    def encrypt(self, path: str | Path) -> EncryptResult:
        """Encrypt a secret file, preferring a fresher decrypted sibling."""
        console.action(f"Encrypting {console.highlight(str(path))}")
        return encrypt_secret(path, sops=self.sops, dec_suffix=self.settings.dec_suffix)

    def decrypt(self, path: str | Path) -> DecryptResult:
        """Decrypt a secret file into its decrypted sibling."""
        console.action(f"Decrypting {console.highlight(str(path))}")
        result = decrypt_secret(path, sops=self.sops, dec_suffix=self.settings.dec_suffix)
        if result.decrypted:
            console.success(f"Decrypted to {console.highlight(str(result.path))}")
        return result

    def view(self, path: str | Path) -> None:
        """Print the plaintext of a secret file to stdout."""
        view_secret(path, sops=self.sops)

    def edit(self, path: str | Path, editor: str | None = None) -> DecryptResult:
        """Decrypt a secret file and open its plaintext for editing."""
        result = edit_secret(path, sops=self.sops, dec_suffix=self.settings.dec_suffix, editor=editor)
        if result.path != Path(path):
            console.info(f"Run {console.highlight(f'helm-secrets enc {path}')} to encrypt your changes")
        return result

    def clean(self, directory: str | Path) -> list[Path]:
        """Remove every decrypted sibling below a directory."""
        removed = clean_decrypted(directory, dec_suffix=self.settings.dec_suffix)
        if removed:
            console.success(f"Removed {console.highlight(str(len(removed)))} decrypted file(s)")
        else:
            console.info("No decrypted files found")
        return removed

    def forward(self, command: str, argv: Sequence[str]) -> int:
        """Run a wrapped helm command and return its exit status."""
        return self.forwarder.forward(command, argv)

    def setup(self, *, sops_version: str = DEFAULT_SOPS_VERSION, git_diff: bool = True) -> str:
        """Make sure sops is usable and optionally register the git diff driver.

        Args:
            sops_version: sops release downloaded when no binary is found.
            git_diff: Whether to configure the ``sopsdiffer`` textconv driver.

        Returns:
            The sops binary that will be used.

        """
        binary = resolve_sops_binary(self.settings.sops_binary, sops_version)
        self.sops = Sops(binary)
        self.forwarder.sops = self.sops
        console.success(f"Using {console.highlight(self.sops.version() or binary)}")
        if git_diff:
            configure_git_diff(binary)
        return binary
