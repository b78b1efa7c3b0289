"""
Weave Config — Engine Settings Tests
======================================
Covers:
- Defaults
- Coercion of plain strings to enums
- Environment parsing
- Rejection of invalid values
"""

import pytest

from weave.config.settings import DEFAULT_MAX_CHAIN_DEPTH, EngineSettings, ErrorPolicy
from weave.diagnostics.records import LogMode, LogType
from weave.errors import ConfigurationError


class TestDefaults:
    def test_default_values(self):
        settings = EngineSettings()
        assert settings.log_mode is LogMode.CUSTOM
        assert settings.log_types == frozenset(
            {LogType.CREATION, LogType.INTERACTION, LogType.ERROR}
        )
        assert settings.max_chain_depth == DEFAULT_MAX_CHAIN_DEPTH == 200
        assert settings.error_policy is ErrorPolicy.FATAL
        assert settings.exit_gracefully is False

    def test_strings_are_coerced(self):
        settings = EngineSettings(
            log_mode="debug", log_types=["error"], error_policy="log"
        )
        assert settings.log_mode is LogMode.DEBUG
        assert settings.log_types == frozenset({LogType.ERROR})
        assert settings.error_policy is ErrorPolicy.LOG


class TestValidation:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"log_mode": "verbose"},
            {"log_types": ["creation", "nonsense"]},
            {"error_policy": "ignore"},
            {"max_chain_depth": 0},
            {"max_chain_depth": -3},
            {"max_chain_depth": "10"},
            {"max_chain_depth": True},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(ConfigurationError):
            EngineSettings(**kwargs)


class TestFromEnv:
    def test_empty_environment_gives_defaults(self):
        assert EngineSettings.from_env({}) == EngineSettings()

    def test_full_environment(self):
        settings = EngineSettings.from_env({
            "WEAVE_LOG_MODE": " DEBUG ",
            "WEAVE_LOG_TYPES": "creation, destruction,,",
            "WEAVE_MAX_CHAIN_DEPTH": "50",
            "WEAVE_ERROR_POLICY": "log",
            "WEAVE_EXIT_GRACEFULLY": "yes",
        })
        assert settings.log_mode is LogMode.DEBUG
        assert settings.log_types == frozenset({LogType.CREATION, LogType.DESTRUCTION})
        assert settings.max_chain_depth == 50
        assert settings.error_policy is ErrorPolicy.LOG
        assert settings.exit_gracefully is True

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("WEAVE_MAX_CHAIN_DEPTH", "12")
        assert EngineSettings.from_env().max_chain_depth == 12

    def test_non_integer_depth(self):
        with pytest.raises(ConfigurationError, match="WEAVE_MAX_CHAIN_DEPTH"):
            EngineSettings.from_env({"WEAVE_MAX_CHAIN_DEPTH": "deep"})

    def test_bad_boolean(self):
        with pytest.raises(ConfigurationError, match="WEAVE_EXIT_GRACEFULLY"):
            EngineSettings.from_env({"WEAVE_EXIT_GRACEFULLY": "maybe"})
