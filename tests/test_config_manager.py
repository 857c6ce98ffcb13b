import re
from dataclasses import FrozenInstanceError

import pytest

from core.config_manager import FALLBACK_ORIGIN, ServiceConfig, load_config
from core.exceptions import ConfigError


def _load(env, tmp_path):
    return load_config(env=env, runtime_path=tmp_path / "missing.yaml")


def test_defaults(tmp_path):
    config = _load({}, tmp_path)
    assert config == ServiceConfig()
    assert config.allowed_origins == (FALLBACK_ORIGIN,)
    assert config.model_mode == "auto"
    assert config.port == 3000
    assert not config.token_required


def test_env_overrides(tmp_path):
    config = _load({
        "ORIGINS": "https://a.example, https://b.example ,",
        "APP_TOKEN": "secret",
        "MODEL": "gpt-4.1",
        "MODEL_MODE": "MINI",
        "PORT": "8080",
        "RATE_LIMIT_MAX": "5",
        "OPENAI_TIMEOUT": "30",
        "RELOAD": "yes",
    }, tmp_path)

    assert config.allowed_origins == ("https://a.example", "https://b.example")
    assert config.app_token == "secret"
    assert config.token_required
    assert config.default_model == "gpt-4.1"
    assert config.model_mode == "mini"
    assert config.port == 8080
    assert config.rate_limit_max == 5
    assert config.request_timeout == 30.0
    assert config.reload is True


def test_single_origin_variable(tmp_path):
    assert _load({"ORIGIN": "https://c.example"}, tmp_path).allowed_origins == ("https://c.example",)


def test_blank_origins_keep_fallback(tmp_path):
    assert _load({"ORIGINS": " , "}, tmp_path).allowed_origins == (FALLBACK_ORIGIN,)


def test_unknown_model_mode_falls_back_to_auto(tmp_path):
    assert _load({"MODEL_MODE": "turbo"}, tmp_path).model_mode == "auto"


def test_invalid_port_is_config_error(tmp_path):
    with pytest.raises(ConfigError):
        _load({"PORT": "eighty"}, tmp_path)


def test_runtime_yaml_is_overridden_by_env(tmp_path):
    runtime = tmp_path / "runtime.yaml"
    runtime.write_text(
        "model_mode: full\nrate_limit_window: 10\nallowed_origins:\n  - https://yaml.example\nunknown_key: 1\n",
        encoding="utf-8",
    )

    config = load_config(env={"MODEL_MODE": "mini"}, runtime_path=runtime)

    assert config.model_mode == "mini"
    assert config.rate_limit_window == 10
    assert config.allowed_origins == ("https://yaml.example",)


def test_runtime_yaml_must_be_mapping(tmp_path):
    runtime = tmp_path / "runtime.yaml"
    runtime.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(env={}, runtime_path=runtime)


def test_origin_suffix_regex():
    config = ServiceConfig(allowed_origins=("https://app.example",))
    assert re.fullmatch(config.origin_regex, "https://someone.github.io")
    assert not re.fullmatch(config.origin_regex, "https://evil.example")
    assert not re.fullmatch(config.origin_regex, "https://githubxio")
    assert ServiceConfig(origin_suffix="").origin_regex is None


def test_dotenv_fills_unset_variables(tmp_path):
    dotenv_file = tmp_path / ".env"
    dotenv_file.write_text(
        "OPENAI_API_KEY=sk-file\nAPP_TOKEN=from-file\nMODEL=file-model\n",
        encoding="utf-8",
    )

    config = load_config(
        env={"MODEL": "env-model", "APP_TOKEN": "  "},
        runtime_path=tmp_path / "missing.yaml",
        dotenv_path=dotenv_file,
    )

    assert config.openai_api_key == "sk-file"
    assert config.app_token == "from-file"
    assert config.default_model == "env-model"


def test_missing_dotenv_file_is_ignored(tmp_path):
    config = load_config(
        env={"MODEL": "env-model"},
        runtime_path=tmp_path / "missing.yaml",
        dotenv_path=tmp_path / "absent.env",
    )
    assert config.default_model == "env-model"
    assert config.openai_api_key == ""


def test_config_is_immutable():
    config = ServiceConfig()
    with pytest.raises(FrozenInstanceError):
        config.app_token = "x"
