"""Confirmation policies for forwarded helm commands.

A policy receives the fully resolved command line and returns whether it
may run. The interactive policy asks through questionary; the automatic
one backs ``--yes``.
"""

from collections.abc import Callable, Sequence

import questionary
from questionary import Style

ConfirmPolicy = Callable[[Sequence[str]], bool]

PROMPT_STYLE = Style(
    [
        ("qmark", "fg:#af87ff bold"),
        ("question", "bold"),
        ("answer", "fg:#ff87d7 bold"),
        ("instruction", "fg:#6c6c6c italic"),
    ]
)
QMARK = "? "


def auto_confirm(argv: Sequence[str]) -> bool:  # noqa: ARG001
    """Approve every command without asking."""
    return True


def interactive_confirm(argv: Sequence[str]) -> bool:
    """Ask the operator whether the resolved helm command should run.

    Args:
        argv: The resolved command line, shown to the operator beforehand.

    Returns:
        True if the operator confirmed.

    """
    subcommand = " ".join(argv[1:2])
    return bool(
        questionary.confirm(
            f"Run helm {subcommand} with the arguments above?",
            default=True,
            style=PROMPT_STYLE,
            qmark=QMARK,
        ).unsafe_ask()
    )
