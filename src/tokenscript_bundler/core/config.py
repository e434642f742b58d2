import json
import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, ValidationError

from tokenscript_bundler.core.uri import DEFAULT_REGISTRY_URL
from tokenscript_bundler.errors import ConfigError

OutputFormat = Literal["python", "javascript"]

DEFAULT_OUTPUT = {"python": "./tokenscript_schemas.py", "javascript": "./tokenscript-schemas.js"}


class BundleConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    schemas: list[str]
    output: str | None = None
    format: OutputFormat | None = None


def get_registry_url() -> str:
    return os.getenv("TOKENSCRIPT_REGISTRY_URL", DEFAULT_REGISTRY_URL)


def load_bundle_config(config_path: str | Path) -> BundleConfig:
    path = Path(config_path)
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}") from None
    try:
        return BundleConfig.model_validate(json.loads(content))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Config file {path} is not valid JSON: {exc}") from exc
    except ValidationError as exc:
        raise ConfigError(f"Invalid config file {path}: {exc}") from exc
