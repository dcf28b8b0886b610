"""Tests for mode derivation, the defaults shortcut, menus and token limits."""

from __future__ import annotations

import pytest

from claude_bedrock.args import parse_args
from claude_bedrock.config import LauncherSettings
from claude_bedrock.configure import (
    apply_defaults,
    enforce_token_limits,
    initial_config,
    interactive_configure,
    mode_from_name,
)
from claude_bedrock.errors import ConfigError, InvalidModelNameError
from claude_bedrock.types import LaunchConfig, ModelFamily, ModelMode
from conftest import ScriptedPrompter


def _config(argv, settings, use_defaults=None):
    args = parse_args(argv)
    flag = args.use_defaults if use_defaults is None else use_defaults
    return apply_defaults(initial_config(args, settings, flag), args, settings)


class TestModeFromName:
    @pytest.mark.parametrize(
        "name, mode",
        [
            ("opusplan", ModelMode.OPUSPLAN),
            ("OpusPlan (Opus + Sonnet)", ModelMode.OPUSPLAN),
            ("opus", ModelMode.OPUS),
            ("Claude-OPUS-4.5", ModelMode.OPUS),
            ("sonnet", ModelMode.SONNET),
            ("Sonnet 4.5", ModelMode.SONNET),
            # "opus" outranks "sonnet" when both appear.
            ("sonnet-or-opus", ModelMode.OPUS),
        ],
    )
    def test_valid(self, name, mode):
        assert mode_from_name(name) is mode

    @pytest.mark.parametrize("name", ["haiku", "", "gpt-4", "op us"])
    def test_invalid(self, name):
        with pytest.raises(InvalidModelNameError, match="Invalid model name"):
            mode_from_name(name)

    def test_families(self):
        assert ModelMode.OPUSPLAN.families == (ModelFamily.OPUS, ModelFamily.SONNET)
        assert ModelMode.OPUS.families == (ModelFamily.OPUS,)
        assert ModelMode.SONNET.families == (ModelFamily.SONNET,)


class TestApplyDefaults:
    def test_defaults_flag(self, settings, capsys):
        config = _config(["--defaults"], settings)
        assert config.mode is ModelMode.OPUSPLAN
        assert config.max_output_tokens == 4096
        assert config.max_thinking_tokens == 1024
        assert "Using default settings: OpusPlan (Opus + Sonnet), 4096 output tokens" in capsys.readouterr().out

    def test_defaults_override_flags(self, settings):
        config = _config(
            ["--defaults", "--model-name", "sonnet", "--max-output-tokens", "32768", "--max-thinking-tokens", "8192"],
            settings,
        )
        assert config.mode is ModelMode.OPUSPLAN
        assert (config.max_output_tokens, config.max_thinking_tokens) == (4096, 1024)

    def test_defaults_issue_no_prompts(self, settings):
        config = _config([], settings, use_defaults=True)
        prompter = ScriptedPrompter()
        result = interactive_configure(config, settings, prompter)
        assert prompter.prompts == []
        assert result == config

    def test_model_name_sets_mode(self, settings):
        config = _config(["--model-name", "SONNET"], settings)
        assert config.mode is ModelMode.SONNET
        assert config.max_output_tokens is None

    def test_bad_model_name(self, settings):
        with pytest.raises(InvalidModelNameError):
            _config(["--model-name", "haiku"], settings)

    def test_token_flags_parsed(self, settings):
        config = _config(["--max-output-tokens", "16384", "--max-thinking-tokens", " 2048 "], settings)
        assert config.max_output_tokens == 16384
        assert config.max_thinking_tokens == 2048

    @pytest.mark.parametrize("value", ["lots", "0", "-5", "1.5", "12345", "1000", "1024"])
    def test_bad_output_token_flag(self, settings, value):
        with pytest.raises(ConfigError, match="--max-output-tokens must be one of 4096, 8192, 16384, 32768"):
            _config(["--max-output-tokens", value], settings)

    @pytest.mark.parametrize("value", ["3000", "16384", "none"])
    def test_bad_thinking_token_flag(self, settings, value):
        with pytest.raises(ConfigError, match="--max-thinking-tokens must be one of 1024, 2048, 4096, 8192"):
            _config(["--max-thinking-tokens", value], settings)

    def test_token_flags_follow_configured_choices(self):
        settings = LauncherSettings(output_token_choices=[2048, 12345], thinking_token_choices=[1000])
        config = _config(["--max-output-tokens", "12345", "--max-thinking-tokens", "1000"], settings)
        assert (config.max_output_tokens, config.max_thinking_tokens) == (12345, 1000)

    def test_profile_flag(self, settings):
        config = _config(["--profile", "dev01"], settings)
        assert config.profile == "dev01"
        assert config.profile_from_flag is True

    def test_default_profile(self, settings):
        config = _config([], settings)
        assert config.profile == "prod-it01-bedrock"
        assert config.profile_from_flag is False
        assert config.region == "us-west-2"


class TestInteractiveConfigure:
    def test_blank_answers_pick_defaults(self, settings, capsys):
        config = _config([], settings)
        prompter = ScriptedPrompter(["", "", "", ""])
        result = interactive_configure(config, settings, prompter)
        assert result.profile == "prod-it01-bedrock"
        assert result.mode is ModelMode.OPUSPLAN
        assert result.max_output_tokens == 4096
        assert result.max_thinking_tokens == 1024
        assert len(prompter.prompts) == 4
        out = capsys.readouterr().out
        assert "Selected: OpusPlan (default)" in out
        assert "Selected: 4,096 tokens (default)" in out

    def test_explicit_choices(self, settings, capsys):
        config = _config([], settings)
        prompter = ScriptedPrompter(["2", "3", "2", "3"])
        result = interactive_configure(config, settings, prompter)
        assert result.profile == "dev01"
        assert result.mode is ModelMode.SONNET
        assert result.max_output_tokens == 8192
        assert result.max_thinking_tokens == 4096
        assert "WARNING" not in capsys.readouterr().out

    def test_unmatched_input_picks_default(self, settings):
        config = _config([], settings)
        prompter = ScriptedPrompter(["9", "opus", "0", "-1"])
        result = interactive_configure(config, settings, prompter)
        assert result.profile == "prod-it01-bedrock"
        assert result.mode is ModelMode.OPUSPLAN
        assert result.max_output_tokens == 4096
        assert result.max_thinking_tokens == 1024

    def test_high_limits_warn(self, settings, capsys):
        config = _config([], settings)
        prompter = ScriptedPrompter(["", "2", "4", "4"])
        result = interactive_configure(config, settings, prompter)
        assert result.mode is ModelMode.OPUS
        assert result.max_output_tokens == 32768
        assert result.max_thinking_tokens == 8192
        out = capsys.readouterr().out
        assert out.count("WARNING: Higher token limits") == 2

    def test_profile_menu_skipped_with_flag(self, settings):
        config = _config(["--profile", "dev01"], settings)
        prompter = ScriptedPrompter(["", "", ""])
        result = interactive_configure(config, settings, prompter)
        assert result.profile == "dev01"
        assert len(prompter.prompts) == 3

    def test_flag_values_skip_their_menus(self, settings):
        config = _config(
            ["--profile", "dev01", "--model-name", "opus", "--max-output-tokens", "8192"],
            settings,
        )
        prompter = ScriptedPrompter(["2"])
        result = interactive_configure(config, settings, prompter)
        assert result.mode is ModelMode.OPUS
        assert result.max_output_tokens == 8192
        assert result.max_thinking_tokens == 2048
        assert prompter.prompts == ["Enter your choice [1-4] (press Enter for default): "]

    def test_config_not_mutated(self, settings):
        config = _config([], settings)
        interactive_configure(config, settings, ScriptedPrompter(["2", "2", "2", "2"]))
        assert config.mode is None
        assert config.profile == "prod-it01-bedrock"


class TestEnforceTokenLimits:
    def _cfg(self, output, thinking):
        return LaunchConfig(
            profile="p", region="r", max_output_tokens=output, max_thinking_tokens=thinking
        )

    def test_valid_combination_unchanged(self, settings, capsys):
        config = self._cfg(8192, 4096)
        assert enforce_token_limits(config, settings) == config
        assert capsys.readouterr().out == ""

    @pytest.mark.parametrize(
        "output, thinking",
        [(4096, 4096), (4096, 8192), (8192, 8192), (4096, 2048 * 2)],
    )
    def test_invalid_combination_resets_to_default(self, settings, output, thinking, capsys):
        result = enforce_token_limits(self._cfg(output, thinking), settings)
        assert result.max_thinking_tokens == 1024
        assert result.max_output_tokens == output
        out = capsys.readouterr().out
        assert "must be less than" in out
        assert "Adjusted to: 1,024 tokens" in out

    def test_smallest_output_choice_with_largest_thinking_is_corrected(self, settings):
        config = _config(["--max-output-tokens", "4096", "--max-thinking-tokens", "8192"], settings)
        result = enforce_token_limits(config, settings)
        assert (result.max_output_tokens, result.max_thinking_tokens) == (4096, 1024)

    def test_missing_values_take_defaults(self, settings):
        result = enforce_token_limits(self._cfg(None, None), settings)
        assert (result.max_output_tokens, result.max_thinking_tokens) == (4096, 1024)
