"""Flag grammars of the helm commands that can be forwarded.

The wrapper needs to know which options take a value so it can tell a
values file apart from a positional argument. Grammars are looked up
through a provider so a different source (for example one built from
``helm <command> --help``) can replace the built-in tables.
"""

from collections.abc import Iterable, Mapping
from typing import Protocol

from helm_secrets.exceptions import UnsupportedModeError
from helm_secrets.models import FlagGrammar

# Global flags accepted by every helm command
_GLOBAL_WITH_VALUE = frozenset(
    {
        "--burst-limit",
        "--kube-apiserver",
        "--kube-as-group",
        "--kube-as-user",
        "--kube-ca-file",
        "--kube-context",
        "--kube-tls-server-name",
        "--kube-token",
        "--kubeconfig",
        "--namespace",
        "--qps",
        "--registry-config",
        "--repository-cache",
        "--repository-config",
    }
)
_GLOBAL_FLAGS = frozenset({"--debug", "--kube-insecure-skip-tls-verify"})

# Options shared by install, upgrade and template
_CHART_WITH_VALUE = frozenset(
    {
        "--ca-file",
        "--cert-file",
        "--description",
        "--key-file",
        "--keyring",
        "--labels",
        "--password",
        "--post-renderer",
        "--post-renderer-args",
        "--repo",
        "--set",
        "--set-file",
        "--set-json",
        "--set-literal",
        "--set-string",
        "--timeout",
        "--username",
        "--values",
        "--version",
    }
)
_CHART_FLAGS = frozenset(
    {
        "--atomic",
        "--create-namespace",
        "--dependency-update",
        "--devel",
        "--disable-openapi-validation",
        "--dry-run",
        "--enable-dns",
        "--force",
        "--hide-notes",
        "--insecure-skip-tls-verify",
        "--no-hooks",
        "--pass-credentials",
        "--plain-http",
        "--render-subchart-notes",
        "--skip-crds",
        "--skip-schema-validation",
        "--take-ownership",
        "--verify",
        "--wait",
        "--wait-for-jobs",
    }
)


def _grammar(
    name: str,
    helm_command: tuple[str, ...],
    *,
    short_with_value: Iterable[str] = (),
    short_flags: Iterable[str] = (),
    long_with_value: Iterable[str] = (),
    long_flags: Iterable[str] = (),
    min_positionals: int = 0,
) -> FlagGrammar:
    return FlagGrammar(
        name=name,
        helm_command=helm_command,
        short_with_value=frozenset({"n", *short_with_value}),
        short_flags=frozenset({"h", *short_flags}),
        long_with_value=_GLOBAL_WITH_VALUE | frozenset(long_with_value),
        long_flags=_GLOBAL_FLAGS | frozenset({"--help", *long_flags}),
        min_positionals=min_positionals,
    )


HELM_GRAMMARS: dict[str, FlagGrammar] = {
    "install": _grammar(
        "install",
        ("install",),
        short_with_value={"f", "o"},
        short_flags={"g"},
        long_with_value=_CHART_WITH_VALUE | {"--name-template", "--output"},
        long_flags=_CHART_FLAGS | {"--generate-name", "--hide-secret", "--replace"},
        min_positionals=1,
    ),
    "upgrade": _grammar(
        "upgrade",
        ("upgrade",),
        short_with_value={"f", "o"},
        short_flags={"i"},
        long_with_value=_CHART_WITH_VALUE | {"--history-max", "--output"},
        long_flags=_CHART_FLAGS
        | {"--cleanup-on-fail", "--install", "--reset-then-reuse-values", "--reset-values", "--reuse-values"},
        min_positionals=2,
    ),
    "template": _grammar(
        "template",
        ("template",),
        short_with_value={"f", "a", "s"},
        short_flags={"g"},
        long_with_value=_CHART_WITH_VALUE
        | {"--api-versions", "--kube-version", "--name-template", "--output-dir", "--release-name", "--show-only"},
        long_flags=_CHART_FLAGS
        | {
            "--generate-name",
            "--hide-secret",
            "--include-crds",
            "--is-upgrade",
            "--replace",
            "--skip-tests",
            "--validate",
        },
        min_positionals=1,
    ),
    "lint": _grammar(
        "lint",
        ("lint",),
        short_with_value={"f"},
        long_with_value={
            "--kube-version",
            "--set",
            "--set-file",
            "--set-json",
            "--set-literal",
            "--set-string",
            "--values",
        },
        long_flags={"--quiet", "--skip-schema-validation", "--strict", "--with-subcharts"},
    ),
    "diff": _grammar(
        "diff",
        ("diff", "upgrade"),
        short_with_value={"f", "a", "C", "D"},
        long_with_value=_CHART_WITH_VALUE
        | {"--api-versions", "--context", "--find-renames", "--kube-version", "--output"},
        long_flags=_CHART_FLAGS
        | {
            "--allow-unreleased",
            "--color",
            "--detailed-exitcode",
            "--disable-validation",
            "--include-tests",
            "--install",
            "--no-color",
            "--normalize-manifests",
            "--reset-values",
            "--reuse-values",
            "--show-secrets",
            "--show-secrets-decoded",
            "--strip-trailing-cr",
            "--suppress-secrets",
            "--three-way-merge",
        },
        min_positionals=2,
    ),
}


class GrammarProvider(Protocol):
    """Anything able to look up the flag grammar of a forwarded command."""

    def get(self, command: str) -> FlagGrammar:
        """Return the grammar of ``command`` or raise UnsupportedModeError."""
        ...

    def commands(self) -> list[str]:
        """Return the supported command names."""
        ...


class StaticGrammarProvider:
    """Grammar provider backed by an in-memory table.

    Attributes:
        grammars: Mapping of command name to grammar.

    """

    def __init__(self, grammars: Mapping[str, FlagGrammar] | None = None) -> None:
        self.grammars: dict[str, FlagGrammar] = dict(HELM_GRAMMARS if grammars is None else grammars)

    def __repr__(self) -> str:
        """Return a detailed string representation for debugging."""
        return f"StaticGrammarProvider(commands={self.commands()!r})"

    def get(self, command: str) -> FlagGrammar:
        """Return the grammar of ``command``.

        Raises:
            UnsupportedModeError: If the command is not in the table.

        """
        try:
            return self.grammars[command]
        except KeyError:
            supported = ", ".join(self.commands())
            raise UnsupportedModeError(f"Unsupported command '{command}' (supported: {supported})") from None

    def commands(self) -> list[str]:
        """Return the supported command names, sorted."""
        return sorted(self.grammars)
