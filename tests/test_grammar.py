"""Tests for forwarding/grammar.py module."""

import pytest

from helm_secrets.exceptions import UnsupportedModeError
from helm_secrets.forwarding.grammar import HELM_GRAMMARS, StaticGrammarProvider
from helm_secrets.models import FlagGrammar


class TestHelmGrammars:
    """Tests for the built-in grammar tables."""

    def test_supported_commands(self):
        """Test the forwarded commands."""
        assert sorted(HELM_GRAMMARS) == ["diff", "install", "lint", "template", "upgrade"]

    @pytest.mark.parametrize("name", sorted(HELM_GRAMMARS))
    def test_values_flags_take_a_value(self, name):
        """Test every grammar knows -f and --values take a value."""
        grammar = HELM_GRAMMARS[name]

        assert "f" in grammar.short_with_value
        assert "--values" in grammar.long_with_value
        assert "n" in grammar.short_with_value

    def test_diff_forwards_to_plugin(self):
        """Test diff is forwarded as helm diff upgrade."""
        assert HELM_GRAMMARS["diff"].helm_command == ("diff", "upgrade")

    def test_upgrade_needs_release_and_chart(self):
        """Test the minimum positional count of upgrade."""
        assert HELM_GRAMMARS["upgrade"].min_positionals == 2


class TestStaticGrammarProvider:
    """Tests for StaticGrammarProvider class."""

    def test_default_table(self):
        """Test the provider defaults to the built-in grammars."""
        provider = StaticGrammarProvider()

        assert provider.get("install") is HELM_GRAMMARS["install"]
        assert provider.commands() == sorted(HELM_GRAMMARS)

    def test_custom_table(self):
        """Test a provider built from a custom table."""
        grammar = FlagGrammar(name="status", helm_command=("status",), min_positionals=1)
        provider = StaticGrammarProvider({"status": grammar})

        assert provider.get("status") is grammar
        assert provider.commands() == ["status"]

    def test_unsupported_command(self):
        """Test unknown commands raise UnsupportedModeError naming the choices."""
        provider = StaticGrammarProvider()

        with pytest.raises(UnsupportedModeError) as exc_info:
            provider.get("rollback")

        assert "rollback" in str(exc_info.value)
        assert "install" in str(exc_info.value)

    def test_repr(self):
        """Test the debugging representation lists commands."""
        assert "upgrade" in repr(StaticGrammarProvider())


class TestGrammarFlagClasses:
    """Tests pinning how individual helm flags are classified."""

    @pytest.mark.parametrize(
        ("command", "flag"),
        [
            ("install", "--hide-secret"),
            ("upgrade", "--take-ownership"),
            ("template", "--skip-tests"),
            ("diff", "--show-secrets-decoded"),
            ("diff", "--normalize-manifests"),
            ("diff", "--strip-trailing-cr"),
            ("diff", "--color"),
            ("diff", "--disable-validation"),
            ("diff", "--skip-schema-validation"),
        ],
    )
    def test_boolean_flags(self, command, flag):
        """Test flags that never take a value."""
        grammar = HELM_GRAMMARS[command]

        assert flag in grammar.long_flags
        assert flag not in grammar.long_with_value

    @pytest.mark.parametrize("flag", ["--find-renames", "--api-versions", "--kube-version", "--post-renderer"])
    def test_diff_value_flags(self, flag):
        """Test helm-diff flags that take a value."""
        assert flag in HELM_GRAMMARS["diff"].long_with_value

    @pytest.mark.parametrize("name", sorted(HELM_GRAMMARS))
    def test_no_flag_is_both_boolean_and_valued(self, name):
        """Test no long flag is classified both ways."""
        grammar = HELM_GRAMMARS[name]

        assert grammar.long_flags.isdisjoint(grammar.long_with_value)
        assert grammar.short_flags.isdisjoint(grammar.short_with_value)

    @pytest.mark.parametrize("name", sorted(HELM_GRAMMARS))
    def test_short_help_flag(self, name):
        """Test -h is a boolean option for every command."""
        assert "h" in HELM_GRAMMARS[name].short_flags
