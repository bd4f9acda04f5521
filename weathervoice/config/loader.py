"""YAML config loader with environment overrides and dotted-key lookup."""

import hashlib
import os
from pathlib import Path
from typing import Any

import yaml

from weathervoice.config.defaults import CALLBACK_URL_ENV, DEFAULT_UPSTREAM_URLS
from weathervoice.config.schema import AppConfig


def load_config(path: str | Path) -> AppConfig:
    """Load and validate config from a YAML file.

    An empty file yields the defaults. A blank upstream URL is replaced with
    the provider default, and WEATHERVOICE_CALLBACK_URL overrides the voice
    callback URL.
    """
    path = Path(path)
    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    callback_url = os.environ.get(CALLBACK_URL_ENV)
    if callback_url:
        raw.setdefault("voice", {})["callback_url"] = callback_url

    return with_provider_defaults(AppConfig(**raw))


def with_provider_defaults(config: AppConfig) -> AppConfig:
    """Return a copy with the upstream URL filled in from the provider."""
    if config.upstream.url:
        return config
    return config.model_copy(
        update={
            "upstream": config.upstream.model_copy(
                update={"url": DEFAULT_UPSTREAM_URLS[config.upstream.provider]}
            )
        }
    )


def config_hash(config: AppConfig) -> str:
    """Compute a deterministic SHA256 hash of the config."""
    data = config.model_dump_json(indent=None)
    return hashlib.sha256(data.encode()).hexdigest()[:16]


def get_config_value(config: AppConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'cache.ttl_minutes'."""
    parts = dotted_key.split(".")
    obj: Any = config
    for part in parts:
        if isinstance(obj, list):
            obj = obj[int(part)]
        elif hasattr(obj, part):
            obj = getattr(obj, part)
        elif isinstance(obj, dict):
            obj = obj[part]
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj
