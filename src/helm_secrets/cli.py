#!/usr/bin/env python
"""Command-line interface for helm-secrets.

This module provides the main CLI entry point for the helm-secrets tool,
handling command-line argument parsing and dispatching to the secret
file operations and the helm forwarding commands.
"""

import sys
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

import click
from icecream import ic

from helm_secrets import __version__, console
from helm_secrets.core.helm_secrets import HelmSecrets
from helm_secrets.exceptions import ArgumentParsingError, HelmSecretsError
from helm_secrets.forwarding.grammar import HELM_GRAMMARS
from helm_secrets.models import DEFAULT_DEC_SUFFIX, DEFAULT_SOPS_VERSION, Settings

_PATH = click.Path(path_type=Path)


@contextmanager
def handle_errors() -> Generator[None, None, None]:
    """Turn helm-secrets errors into CLI errors.

    Argument errors become click usage errors (exit status 2); every other
    HelmSecretsError is printed and exits with status 1.

    """
    try:
        yield
    except ArgumentParsingError as e:
        raise click.UsageError(str(e)) from None
    except HelmSecretsError as e:
        console.error(str(e))
        sys.exit(1)


@click.group(
    help="Decrypt sops-encrypted secrets[.*].yaml values files around helm commands",
    invoke_without_command=True,
)
@click.option("--version", "-v", required=False, is_flag=True, help="print version")
@click.option("--debug", required=False, is_flag=True, help="print debug information")
@click.option(
    "--yes",
    "-y",
    "assume_yes",
    is_flag=True,
    envvar="HELM_SECRETS_ASSUME_YES",
    help="run helm without asking for confirmation",
)
@click.option("--sops-bin", default="sops", envvar="HELM_SECRETS_SOPS_BIN", show_default=True, help="sops binary")
@click.option("--helm-bin", default="helm", envvar="HELM_BIN", show_default=True, help="helm binary")
@click.option(
    "--dec-suffix",
    default=DEFAULT_DEC_SUFFIX,
    envvar="HELM_SECRETS_DEC_SUFFIX",
    show_default=True,
    help="suffix of decrypted files",
)
@click.pass_context
def cli(
    ctx: click.Context,
    version: bool,
    debug: bool,
    assume_yes: bool,
    sops_bin: str,
    helm_bin: str,
    dec_suffix: str,
) -> None:
    """Process global options and build the shared HelmSecrets instance.

    Args:
        ctx: The click context.
        version: Print version and exit.
        debug: Enable debug output.
        assume_yes: Skip confirmation before running helm.
        sops_bin: sops binary name or path.
        helm_bin: helm binary name or path.
        dec_suffix: Suffix of decrypted sibling files.

    """
    if not debug:
        ic.disable()

    if version:
        click.echo(__version__)
        ctx.exit()

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit()

    settings = Settings(
        sops_binary=sops_bin,
        helm_binary=helm_bin,
        dec_suffix=dec_suffix,
        assume_yes=assume_yes,
    )
    ic(settings)
    ctx.obj = HelmSecrets(settings)


@cli.command(help="Encrypt a secrets file, or its decrypted sibling into it")
@click.argument("path", type=_PATH)
@click.pass_obj
def enc(helm_secrets: HelmSecrets, path: Path) -> None:
    with handle_errors():
        helm_secrets.encrypt(path)


@cli.command(help="Decrypt a secrets file into its .dec.yaml sibling")
@click.argument("path", type=_PATH)
@click.pass_obj
def dec(helm_secrets: HelmSecrets, path: Path) -> None:
    with handle_errors():
        helm_secrets.decrypt(path)


@cli.command(help="Print a decrypted secrets file without writing it to disk")
@click.argument("path", type=_PATH)
@click.pass_obj
def view(helm_secrets: HelmSecrets, path: Path) -> None:
    with handle_errors():
        helm_secrets.view(path)


@cli.command(help="Decrypt a secrets file and open it in your editor; encrypt afterwards with 'enc'")
@click.argument("path", type=_PATH)
@click.option("--editor", required=False, help="editor command (defaults to $VISUAL or $EDITOR)")
@click.pass_obj
def edit(helm_secrets: HelmSecrets, path: Path, editor: str | None) -> None:
    with handle_errors():
        helm_secrets.edit(path, editor=editor)


@cli.command(help="Recursively remove decrypted files below a directory")
@click.argument("directory", type=_PATH)
@click.pass_obj
def clean(helm_secrets: HelmSecrets, directory: Path) -> None:
    with handle_errors():
        helm_secrets.clean(directory)


@cli.command(help="Make sure sops is available and configure decrypted git diffs")
@click.option(
    "--sops-version",
    default=DEFAULT_SOPS_VERSION,
    envvar="HELM_SECRETS_SOPS_VERSION",
    show_default=True,
    help="sops release to download when sops is missing",
)
@click.option("--no-git-diff", is_flag=True, help="skip configuring the sopsdiffer git diff driver")
@click.pass_obj
def setup(helm_secrets: HelmSecrets, sops_version: str, no_git_diff: bool) -> None:
    with handle_errors():
        try:
            helm_secrets.setup(sops_version=sops_version, git_diff=not no_git_diff)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--sops-version") from None


def _forwarding_command(name: str) -> click.Command:
    """Build the CLI command forwarding to ``helm <name>``."""
    helm_command = " ".join(HELM_GRAMMARS[name].helm_command)

    @click.pass_obj
    def command(helm_secrets: HelmSecrets, helm_args: tuple[str, ...]) -> None:
        with handle_errors():
            returncode = helm_secrets.forward(name, list(helm_args))
        sys.exit(returncode)

    command = click.argument("helm_args", nargs=-1, type=click.UNPROCESSED)(command)
    return click.command(
        name=name,
        help=f"Run 'helm {helm_command}' with secrets[.*].yaml values files decrypted",
        context_settings={"ignore_unknown_options": True},
    )(command)


for _name in HELM_GRAMMARS:
    cli.add_command(_forwarding_command(_name))


if __name__ == "__main__":
    cli()
