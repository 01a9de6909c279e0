"""Helm command forwarding subpackage.

This package contains the flag grammars of wrapped helm commands, the
argument rewriting that swaps in decrypted values files, and the
forwarder that runs helm and cleans up afterwards.
"""

from helm_secrets.forwarding.arguments import rewrite_arguments
from helm_secrets.forwarding.grammar import HELM_GRAMMARS, GrammarProvider, StaticGrammarProvider
from helm_secrets.forwarding.wrapper import EphemeralFiles, Forwarder, forward, run_helm

__all__ = [
    # arguments
    "rewrite_arguments",
    # grammar
    "HELM_GRAMMARS",
    "GrammarProvider",
    "StaticGrammarProvider",
    # wrapper
    "EphemeralFiles",
    "Forwarder",
    "forward",
    "run_helm",
]
