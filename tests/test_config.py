"""Tests for verbs_bot.config."""

from pathlib import Path

import pytest

from verbs_bot.config import load_settings


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setenv("BOT_TOKEN", "123:abc")
    monkeypatch.setenv("EVALUATOR_PATH", "/opt/memo/memo")
    monkeypatch.delenv("EVALUATOR_TIMEOUT", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    return monkeypatch


def test_defaults(env):
    settings = load_settings()
    assert settings.bot_token == "123:abc"
    assert settings.evaluator_path == Path("/opt/memo/memo")
    assert settings.evaluator_timeout is None
    assert settings.log_level == "INFO"


def test_optional_values(env):
    env.setenv("EVALUATOR_TIMEOUT", "2.5")
    env.setenv("LOG_LEVEL", "debug")
    settings = load_settings()
    assert settings.evaluator_timeout == 2.5
    assert settings.log_level == "DEBUG"


def test_relative_evaluator_path_is_resolved(env, tmp_path):
    env.chdir(tmp_path)
    env.setenv("EVALUATOR_PATH", "memo/memo")
    assert load_settings().evaluator_path == tmp_path.resolve() / "memo" / "memo"


@pytest.mark.parametrize("name", ["BOT_TOKEN", "EVALUATOR_PATH"])
def test_missing_required(env, name):
    env.delenv(name)
    with pytest.raises(RuntimeError, match=name):
        load_settings()


def test_bad_timeout(env):
    env.setenv("EVALUATOR_TIMEOUT", "soon")
    with pytest.raises(RuntimeError, match="EVALUATOR_TIMEOUT"):
        load_settings()
