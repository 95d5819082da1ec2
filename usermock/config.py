"""Configuration management for the mock user service."""
from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, Mapping, Optional, Tuple

import yaml

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080
DEFAULT_MAX_GENERATE = 100


@dataclass(frozen=True)
class ServiceSettings:
    """Runtime settings for the HTTP service and its store."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    seed_defaults: bool = True
    random_seed: Optional[int] = None
    max_generate: int = DEFAULT_MAX_GENERATE
    api_tokens: Tuple[str, ...] = field(default_factory=tuple)

    @staticmethod
    def from_dict(data: Mapping[str, object]) -> "ServiceSettings":
        """Create :class:`ServiceSettings` from raw dictionary data."""
        allowed = {"host", "port", "seed_defaults", "random_seed", "max_generate", "api_tokens"}
        unknown = set(data.keys()) - allowed
        if unknown:
            raise ValueError(f"Unknown service configuration fields: {', '.join(sorted(unknown))}")

        max_generate = int(data.get("max_generate", DEFAULT_MAX_GENERATE))
        if max_generate <= 0:
            raise ValueError("max_generate must be a positive integer")

        raw_seed = data.get("random_seed")
        raw_tokens = data.get("api_tokens") or ()
        if isinstance(raw_tokens, str):
            raw_tokens = raw_tokens.split(",")

        return ServiceSettings(
            host=str(data.get("host", DEFAULT_HOST)),
            port=int(data.get("port", DEFAULT_PORT)),
            seed_defaults=bool(data.get("seed_defaults", True)),
            random_seed=int(raw_seed) if raw_seed is not None else None,
            max_generate=max_generate,
            api_tokens=_clean_tokens(raw_tokens),
        )


def _clean_tokens(tokens) -> Tuple[str, ...]:
    return tuple(str(token).strip() for token in tokens if str(token).strip())


def load_settings(config_path: Path) -> ServiceSettings:
    """Load service settings from a YAML file."""
    with config_path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}

    if not isinstance(raw, dict):
        raise ValueError("Configuration file must contain a mapping")
    service_raw = raw.get("service") or {}
    if not isinstance(service_raw, dict):
        raise ValueError("The 'service' key must hold a mapping of settings")
    return ServiceSettings.from_dict(service_raw)


def resolve_config_path(env_value: Optional[str]) -> Path:
    """Resolve the path to the configuration file."""
    if env_value:
        candidate = Path(env_value).expanduser().resolve(strict=False)
    else:
        candidate = (Path(__file__).resolve().parent.parent / "config" / "usermock.yaml").resolve(strict=False)
    return candidate


def apply_env_overrides(
    settings: ServiceSettings,
    environ: Optional[Mapping[str, str]] = None,
) -> ServiceSettings:
    """Return ``settings`` with any ``USERMOCK_*`` variables applied on top."""
    env = os.environ if environ is None else environ

    overrides: Dict[str, object] = {}
    if env.get("USERMOCK_HOST"):
        overrides["host"] = env["USERMOCK_HOST"].strip()
    if env.get("USERMOCK_PORT"):
        overrides["port"] = int(env["USERMOCK_PORT"])
    if env.get("USERMOCK_RANDOM_SEED"):
        overrides["random_seed"] = int(env["USERMOCK_RANDOM_SEED"])
    if env.get("USERMOCK_API_TOKENS") is not None:
        overrides["api_tokens"] = _clean_tokens(env["USERMOCK_API_TOKENS"].split(","))

    return replace(settings, **overrides) if overrides else settings


def settings_from_env(environ: Optional[Mapping[str, str]] = None) -> ServiceSettings:
    """Load the configured YAML file, then apply ``USERMOCK_*`` overrides."""
    env = os.environ if environ is None else environ

    config_path = resolve_config_path(env.get("USERMOCK_CONFIG"))
    settings = load_settings(config_path) if config_path.is_file() else ServiceSettings()
    return apply_env_overrides(settings, env)


__all__ = [
    "ServiceSettings",
    "apply_env_overrides",
    "load_settings",
    "resolve_config_path",
    "settings_from_env",
]
