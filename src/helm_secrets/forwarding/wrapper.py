"""Forwarding of helm commands with transparent secret decryption.

Secret values files referenced by a forwarded command are decrypted
before helm runs. Plaintext files created only for this invocation are
tracked by EphemeralFiles and deleted on every exit path: normal
completion, helm failure, wrapper errors and termination signals.
"""

import signal
import subprocess
import threading
from collections.abc import Callable, Sequence
from pathlib import Path
from types import FrameType
from typing import Any

from icecream import ic

from helm_secrets import console
from helm_secrets.exceptions import BinaryNotFoundError
from helm_secrets.forwarding.arguments import rewrite_arguments
from helm_secrets.forwarding.grammar import GrammarProvider, StaticGrammarProvider
from helm_secrets.models import DEFAULT_DEC_SUFFIX
from helm_secrets.prompts import ConfirmPolicy, interactive_confirm
from helm_secrets.secrets.classify import decrypted_path, is_secret_file
from helm_secrets.secrets.crypt import decrypt_secret
from helm_secrets.secrets.sops import Sops

HelmRunner = Callable[[list[str]], int]


def _exit_on_signal(signum: int, frame: FrameType | None) -> None:  # noqa: ARG001
    """Turn a termination signal into SystemExit so cleanup handlers run."""
    raise SystemExit(128 + signum)


def run_helm(argv: list[str]) -> int:
    """Run helm with inherited stdio and return its exit status.

    Raises:
        BinaryNotFoundError: If the helm binary cannot be executed.

    """
    try:
        return subprocess.run(argv, check=False).returncode
    except FileNotFoundError as err:
        raise BinaryNotFoundError(f"helm binary '{argv[0]}' not found; install helm or set HELM_BIN") from err


class EphemeralFiles:
    """Decrypted files owed deletion when the forwarding scope ends.

    Used as a context manager. While active in the main thread, SIGTERM
    and SIGHUP raise SystemExit so that the cleanup in ``__exit__`` also
    runs when the wrapper is terminated.

    Attributes:
        paths: Files registered for deletion, in registration order.

    """

    _SIGNALS = tuple(sig for sig in (getattr(signal, "SIGTERM", None), getattr(signal, "SIGHUP", None)) if sig)

    def __init__(self) -> None:
        self.paths: list[Path] = []
        self._previous_handlers: dict[int, Any] = {}

    def __enter__(self) -> "EphemeralFiles":
        """Enter context manager, installing signal handlers.

        Returns:
            The EphemeralFiles instance.

        """
        if threading.current_thread() is threading.main_thread():
            for sig in self._SIGNALS:
                self._previous_handlers[sig] = signal.signal(sig, _exit_on_signal)
        return self

    def __exit__(self, exc_type: type | None, exc_val: BaseException | None, exc_tb: object) -> None:
        """Exit context manager, deleting every registered file.

        Args:
            exc_type: Exception type if an exception was raised.
            exc_val: Exception value if an exception was raised.
            exc_tb: Exception traceback if an exception was raised.

        """
        try:
            self.cleanup()
        finally:
            for sig, handler in self._previous_handlers.items():
                signal.signal(sig, handler)
            self._previous_handlers.clear()

    def __repr__(self) -> str:
        """Return a detailed string representation for debugging."""
        return f"EphemeralFiles(paths={self.paths!r})"

    def __len__(self) -> int:
        return len(self.paths)

    def add(self, path: Path) -> None:
        """Register a file for deletion, ignoring duplicates."""
        if path not in self.paths:
            self.paths.append(path)

    def cleanup(self) -> list[Path]:
        """Delete every registered file.

        Failures are reported as warnings and do not raise.

        Returns:
            The paths that were actually removed.

        """
        removed: list[Path] = []
        while self.paths:
            path = self.paths.pop(0)
            try:
                path.unlink()
            except OSError as err:
                console.warning(f"Failed to remove decrypted file {path}: {err}")
                continue
            console.step(f"Removed {path}")
            removed.append(path)
        return removed


class Forwarder:
    """Forwards helm commands, decrypting referenced secret files first.

    Attributes:
        sops: The sops adapter used for decryption.
        grammars: Source of per-command flag grammars.
        confirm: Policy deciding whether the resolved command may run.
        helm_binary: Name or path of the helm executable.
        dec_suffix: Suffix used by decrypted siblings.
        runner: Callable executing the final command line.

    """

    def __init__(
        self,
        *,
        sops: Sops,
        grammars: GrammarProvider | None = None,
        confirm: ConfirmPolicy = interactive_confirm,
        helm_binary: str = "helm",
        dec_suffix: str = DEFAULT_DEC_SUFFIX,
        runner: HelmRunner = run_helm,
    ) -> None:
        self.sops = sops
        self.grammars: GrammarProvider = grammars if grammars is not None else StaticGrammarProvider()
        self.confirm = confirm
        self.helm_binary = helm_binary
        self.dec_suffix = dec_suffix
        self.runner = runner

    def __repr__(self) -> str:
        """Return a detailed string representation for debugging."""
        return f"Forwarder(helm_binary={self.helm_binary!r}, sops={self.sops!r})"

    def _resolve(self, value: str, ephemeral: EphemeralFiles) -> str:
        """Map one values-file reference to the path helm should read.

        A decrypted sibling that existed before this run belongs to the
        operator and is never registered for deletion, even when it was
        refreshed because it had gone stale.
        """
        if not is_secret_file(value, self.dec_suffix):
            return value
        pre_existing = decrypted_path(value, self.dec_suffix).exists()
        result = decrypt_secret(value, sops=self.sops, dec_suffix=self.dec_suffix)
        if result.decrypted and not pre_existing:
            ephemeral.add(result.path)
        return str(result.path)

    def forward(self, command: str, argv: Sequence[str]) -> int:
        """Run a helm command with secret values files decrypted.

        Args:
            command: Wrapper sub-command name, e.g. ``upgrade``.
            argv: Arguments to forward to helm.

        Returns:
            helm's exit status, or 0 when the operator declined to run it.

        Raises:
            UnsupportedModeError: If ``command`` has no known grammar.
            ArgumentParsingError: If ``argv`` does not fit the grammar.
            SecretFileNotFoundError: If a referenced secret file is missing.
            DecryptionError: If sops fails on a referenced secret file.

        """
        grammar = self.grammars.get(command)

        with EphemeralFiles() as ephemeral:
            args = rewrite_arguments(argv, grammar, lambda value: self._resolve(value, ephemeral))
            cmd = [self.helm_binary, *grammar.helm_command, *args]
            ic(cmd, ephemeral)

            console.command_panel(f"helm {' '.join(grammar.helm_command)}", cmd)
            if not self.confirm(cmd):
                console.warning("Skipped, helm was not run")
                return 0

            returncode = self.runner(cmd)
            if returncode != 0:
                console.error(f"helm {command} exited with status {returncode}")
            return returncode


def forward(command: str, argv: Sequence[str], **kwargs: Any) -> int:
    """Forward a helm command; keyword arguments configure the Forwarder."""
    return Forwarder(**kwargs).forward(command, argv)
