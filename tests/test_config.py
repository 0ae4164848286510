"""
tests/test_config.py

Config resolution: env file, environment, explicit arguments, defaults.
"""

from __future__ import annotations

import logging
import os

import pytest

from asnpeers.config import (
    DEFAULT_ASN_API_URL,
    DEFAULT_RPC_URL,
    DEFAULT_TIMEOUT,
    DEFAULT_WORKERS,
    Config,
    load_config,
    load_env_file,
    net_info_url,
)
from asnpeers.errors import ConfigError, ConfigWarning


@pytest.fixture()
def missing_env(tmp_path):
    return tmp_path / "does-not-exist.env"


class TestDefaults:
    def test_missing_env_file_falls_back_to_localhost(self, missing_env) -> None:
        config = load_config(env_file=missing_env)
        assert config.rpc_url == DEFAULT_RPC_URL
        assert config.net_info_url == "http://localhost:26657/net_info"

    def test_missing_env_file_is_logged_not_raised(self, missing_env, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="asnpeers"):
            load_config(env_file=missing_env)
        assert "Error loading .env file" in caplog.text

    def test_other_defaults(self, missing_env) -> None:
        config = load_config(env_file=missing_env)
        assert config.asn_api_url == DEFAULT_ASN_API_URL
        assert config.timeout == DEFAULT_TIMEOUT
        assert config.workers == DEFAULT_WORKERS

    def test_empty_rpc_url_means_default(self, missing_env, monkeypatch) -> None:
        monkeypatch.setenv("RPC_URL", "   ")
        assert load_config(env_file=missing_env).rpc_url == DEFAULT_RPC_URL

    def test_no_env_file_at_all(self) -> None:
        assert load_config(env_file=None).rpc_url == DEFAULT_RPC_URL

    def test_config_is_frozen(self) -> None:
        config = Config()
        with pytest.raises((AttributeError, TypeError)):
            config.rpc_url = "http://elsewhere"  # type: ignore[misc]


class TestEnvFile:
    def test_values_are_loaded(self, tmp_path) -> None:
        env = tmp_path / ".env"
        env.write_text(
            "# node settings\n"
            "RPC_URL=\"http://10.0.0.5:26657/\"\n"
            "export ASNPEERS_WORKERS=4\n"
            "\n"
            "not a pair\n",
            encoding="utf-8",
        )
        config = load_config(env_file=env)
        assert config.rpc_url == "http://10.0.0.5:26657"
        assert config.net_info_url == "http://10.0.0.5:26657/net_info"
        assert config.workers == 4

    def test_environment_beats_env_file(self, tmp_path, monkeypatch) -> None:
        env = tmp_path / ".env"
        env.write_text("RPC_URL=http://from-file:26657\n", encoding="utf-8")
        monkeypatch.setenv("RPC_URL", "http://from-env:26657")
        assert load_config(env_file=env).rpc_url == "http://from-env:26657"

    def test_load_env_file_reports_applied_pairs(self, tmp_path, monkeypatch) -> None:
        env = tmp_path / ".env"
        env.write_text("ASN_API_URL='http://asn.local/v1/as/ip'\n", encoding="utf-8")
        assert load_env_file(env) == {"ASN_API_URL": "http://asn.local/v1/as/ip"}
        assert os.environ["ASN_API_URL"] == "http://asn.local/v1/as/ip"

    def test_missing_file_raises_config_warning(self, missing_env) -> None:
        with pytest.raises(ConfigWarning):
            load_env_file(missing_env)


class TestOverrides:
    def test_arguments_beat_environment(self, missing_env, monkeypatch) -> None:
        monkeypatch.setenv("RPC_URL", "http://from-env:26657")
        monkeypatch.setenv("ASNPEERS_WORKERS", "2")
        config = load_config(
            env_file=missing_env, rpc_url="http://cli:26657", workers=8, timeout=2.5,
        )
        assert config.rpc_url == "http://cli:26657"
        assert config.workers == 8
        assert config.timeout == 2.5

    def test_timeout_from_environment(self, missing_env, monkeypatch) -> None:
        monkeypatch.setenv("ASNPEERS_TIMEOUT", "3")
        assert load_config(env_file=missing_env).timeout == 3.0

    @pytest.mark.parametrize("value", ["many", "0"])
    def test_bad_workers_in_environment(self, missing_env, monkeypatch, value) -> None:
        monkeypatch.setenv("ASNPEERS_WORKERS", value)
        with pytest.raises(ConfigError):
            load_config(env_file=missing_env)

    def test_bad_workers_argument(self, missing_env) -> None:
        with pytest.raises(ConfigError):
            load_config(env_file=missing_env, workers=0)

    def test_bad_timeout_argument(self, missing_env) -> None:
        with pytest.raises(ConfigError):
            load_config(env_file=missing_env, timeout=0)


class TestNetInfoURL:
    @pytest.mark.parametrize("base", ["http://node:26657", "http://node:26657/"])
    def test_single_join(self, base) -> None:
        assert net_info_url(base) == "http://node:26657/net_info"

    def test_config_uses_same_join(self) -> None:
        assert Config(rpc_url="http://node:26657").net_info_url == net_info_url("http://node:26657")
