"""
Configuration Manager for cm-gpt-service.

All process-wide settings live in one immutable ServiceConfig built at
startup and passed explicitly to the components that need it.

Priority: environment variables > .env file > config/runtime.yaml > defaults.

Usage:
    from core.config_manager import load_config
    config = load_config()
    config.model_mode
"""
import os
import re
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml
from dotenv import dotenv_values, find_dotenv

from core.exceptions import ConfigError

CONFIG_DIR = Path(__file__).parent.parent / "config"
RUNTIME_CONFIG_PATH = CONFIG_DIR / "runtime.yaml"

MODEL_MODES = ("auto", "full", "mini")

# Used when neither ORIGINS nor ORIGIN is set.
FALLBACK_ORIGIN = "https://vophong90.github.io"


@dataclass(frozen=True)
class ServiceConfig:
    """
    Runtime settings, read-only after startup.
    """

    # === CORS ===
    allowed_origins: Tuple[str, ...] = (FALLBACK_ORIGIN,)
    # any origin ending with this suffix is accepted as well
    origin_suffix: str = ".github.io"

    # === /api gate ===
    # empty token disables the bearer check
    app_token: str = ""
    rate_limit_max: int = 30
    rate_limit_window: int = 60  # seconds

    # === Models ===
    default_model: str = "gpt-5"
    model_mode: str = "auto"
    full_model: str = "gpt-5"
    mini_model: str = "gpt-5-mini"

    # === Upstream ===
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    request_timeout: float = 120.0

    # === Server ===
    host: str = "0.0.0.0"
    port: int = 3000
    reload: bool = False

    @property
    def token_required(self) -> bool:
        return bool(self.app_token)

    @property
    def origin_regex(self) -> Optional[str]:
        """Origins accepted on top of the allow-list: anything ending with origin_suffix."""
        if not self.origin_suffix:
            return None
        return f".*{re.escape(self.origin_suffix)}"


# env var -> field name
ENV_FIELDS = {
    "ORIGIN_SUFFIX": "origin_suffix",
    "APP_TOKEN": "app_token",
    "RATE_LIMIT_MAX": "rate_limit_max",
    "RATE_LIMIT_WINDOW": "rate_limit_window",
    "MODEL": "default_model",
    "MODEL_MODE": "model_mode",
    "FULL_MODEL": "full_model",
    "MINI_MODEL": "mini_model",
    "OPENAI_API_KEY": "openai_api_key",
    "OPENAI_BASE_URL": "openai_base_url",
    "OPENAI_TIMEOUT": "request_timeout",
    "HOST": "host",
    "PORT": "port",
    "RELOAD": "reload",
}


def _split_origins(raw: Any) -> Tuple[str, ...]:
    if isinstance(raw, (list, tuple)):
        items = [str(o) for o in raw]
    else:
        items = str(raw or "").split(",")
    return tuple(o.strip() for o in items if o and o.strip())


def _coerce(name: str, value: Any, default: Any) -> Any:
    if isinstance(default, bool):
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in {"1", "true", "yes", "on"}
    if isinstance(default, int):
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ConfigError(f"'{name}' must be an integer, got {value!r}")
    if isinstance(default, float):
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ConfigError(f"'{name}' must be a number, got {value!r}")
    return str(value).strip()


def _load_runtime_config(path: Path) -> Dict[str, Any]:
    """Load runtime.yaml overrides if the file exists."""
    if not path.exists():
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (yaml.YAMLError, OSError) as e:
        raise ConfigError(f"cannot read runtime config: {e}", config_path=str(path))

    if not isinstance(data, dict):
        raise ConfigError("runtime config must be a mapping", config_path=str(path))
    return data


def load_config(
    env: Optional[Mapping[str, str]] = None,
    runtime_path: Optional[Path] = None,
    dotenv_path: Optional[Path] = None,
) -> ServiceConfig:
    """
    Build the ServiceConfig.

    Args:
        env: environment mapping (defaults to os.environ)
        runtime_path: YAML override file (defaults to config/runtime.yaml)
        dotenv_path: .env file; when env is not given, the nearest .env
            from the working directory is used

    Values from the .env file only fill variables the environment leaves unset.
    """
    if env is None:
        env = os.environ
        if dotenv_path is None:
            dotenv_path = find_dotenv(usecwd=True) or None
    if dotenv_path:
        file_values = {k: v for k, v in dotenv_values(dotenv_path).items() if v is not None}
        env = {**file_values, **{k: v for k, v in env.items() if str(v).strip()}}

    base = ServiceConfig()
    known = {f.name for f in fields(ServiceConfig)}
    overrides: Dict[str, Any] = {}

    for key, value in _load_runtime_config(runtime_path or RUNTIME_CONFIG_PATH).items():
        if key in known and value is not None:
            overrides[key] = value

    for env_name, field_name in ENV_FIELDS.items():
        raw = env.get(env_name)
        if raw is not None and str(raw).strip() != "":
            overrides[field_name] = raw

    raw_origins = env.get("ORIGINS") or env.get("ORIGIN")
    if raw_origins:
        overrides["allowed_origins"] = raw_origins

    values: Dict[str, Any] = {}
    for name, value in overrides.items():
        if name == "allowed_origins":
            values[name] = _split_origins(value)
        else:
            values[name] = _coerce(name, value, getattr(base, name))

    if "allowed_origins" in values and not values["allowed_origins"]:
        values["allowed_origins"] = (FALLBACK_ORIGIN,)

    mode = str(values.get("model_mode", base.model_mode)).lower()
    values["model_mode"] = mode if mode in MODEL_MODES else "auto"

    return replace(base, **values)
