"""Parsing and rewriting of forwarded helm argument vectors.

Arguments are walked the way helm's own flag parser reads them, so that
the value of a values-file option is never mistaken for a positional
argument. Only values-file options are rewritten; every other token is
kept verbatim and in order.
"""

from collections.abc import Callable, Sequence

from icecream import ic

from helm_secrets.exceptions import ArgumentParsingError
from helm_secrets.models import FlagGrammar


def _rewrite_value(flag: str, value: str, grammar: FlagGrammar, resolve: Callable[[str], str]) -> str:
    """Resolve every comma-separated file in the value of a file option."""
    if flag not in grammar.file_flags:
        return value
    return ",".join(resolve(part) if part else part for part in value.split(","))


def _missing_value(flag: str, grammar: FlagGrammar) -> ArgumentParsingError:
    return ArgumentParsingError(f"helm {grammar.name}: option '{flag}' requires an argument")


def rewrite_arguments(
    argv: Sequence[str],
    grammar: FlagGrammar,
    resolve: Callable[[str], str],
) -> list[str]:
    """Rewrite values-file references in a forwarded argument vector.

    Supported spellings: ``--values=x``, ``--values x``, ``-f x``, ``-fx``,
    ``-f=x`` and clustered boolean short options such as ``-if x``. A bare
    ``--`` ends option processing.

    Args:
        argv: Arguments following the helm sub-command.
        grammar: Flag grammar of the forwarded command.
        resolve: Maps one values-file reference to the path to forward.

    Returns:
        The rewritten argument vector, same length and order as ``argv``.

    Raises:
        ArgumentParsingError: On unknown options, options missing their
            value, or too few positional arguments.

    """
    rewritten: list[str] = []
    positionals = 0
    help_requested = False
    i = 0

    while i < len(argv):
        token = argv[i]

        if token == "--":
            rewritten.extend(argv[i:])
            positionals += len(argv) - i - 1
            break

        if token.startswith("--"):
            name, sep, value = token.partition("=")
            if name in grammar.long_with_value:
                if sep:
                    rewritten.append(f"{name}={_rewrite_value(name, value, grammar, resolve)}")
                else:
                    if i + 1 >= len(argv):
                        raise _missing_value(name, grammar)
                    rewritten.extend([token, _rewrite_value(name, argv[i + 1], grammar, resolve)])
                    i += 1
            elif name in grammar.long_flags:
                # helm accepts --wait=false style booleans
                help_requested = help_requested or name == "--help"
                rewritten.append(token)
            else:
                raise ArgumentParsingError(f"helm {grammar.name}: unrecognized option '{name}'")

        elif token.startswith("-") and token != "-":
            for j in range(1, len(token)):
                letter = token[j]
                flag = f"-{letter}"
                if letter in grammar.short_with_value:
                    rest = token[j + 1 :]
                    if rest:
                        prefix = token[: j + 2] if rest.startswith("=") else token[: j + 1]
                        value = rest[1:] if rest.startswith("=") else rest
                        rewritten.append(prefix + _rewrite_value(flag, value, grammar, resolve))
                    else:
                        if i + 1 >= len(argv):
                            raise _missing_value(flag, grammar)
                        rewritten.extend([token, _rewrite_value(flag, argv[i + 1], grammar, resolve)])
                        i += 1
                    break
                if letter not in grammar.short_flags:
                    raise ArgumentParsingError(f"helm {grammar.name}: invalid option -- '{letter}'")
                help_requested = help_requested or letter == "h"
            else:
                rewritten.append(token)

        else:
            rewritten.append(token)
            positionals += 1

        i += 1

    # helm prints usage for -h without needing release or chart
    if positionals < grammar.min_positionals and not help_requested:
        raise ArgumentParsingError(
            f"helm {grammar.name}: expected at least {grammar.min_positionals} positional argument(s), "
            f"got {positionals}"
        )

    ic(rewritten)
    return rewritten
