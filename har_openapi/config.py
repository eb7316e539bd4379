"""Run configuration: CLI options, environment variables and .env files."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .oas_emitter import DEFAULT_SERVER_URL, DEFAULT_TITLE, DEFAULT_VERSION

DEFAULT_OUTPUT = "openapi.yaml"
FORMATS = ("yaml", "json")


class ConfigError(ValueError):
    """Raised when a required setting is missing or invalid."""


@dataclass
class Settings:
    har_file: str
    base_path: str
    output: str = DEFAULT_OUTPUT
    fmt: str = "yaml"
    title: str = DEFAULT_TITLE
    version: str = DEFAULT_VERSION
    server_url: str = DEFAULT_SERVER_URL


def load_env(path: Optional[str] = None) -> bool:
    """Load a .env file into os.environ without overriding variables already set."""
    return load_dotenv(dotenv_path=path, override=False)


def load_settings(har_file: Optional[str], base_path: Optional[str],
                  output: Optional[str] = None, fmt: Optional[str] = None,
                  title: Optional[str] = None, version: Optional[str] = None,
                  server_url: Optional[str] = None,
                  cwd: Optional[str] = None) -> Settings:
    """Validate raw option values and resolve paths. Raises ConfigError."""
    if not har_file:
        raise ConfigError("Missing HAR_FILE (set it in .env or pass --har-file)")
    if not base_path:
        raise ConfigError("Missing BASE_PATH (set it in .env or pass --base-path)")

    fmt = (fmt or _format_from_output(output)).lower()
    if fmt not in FORMATS:
        raise ConfigError(f"Unsupported output format: {fmt}")

    cwd = cwd or os.getcwd()
    return Settings(
        har_file=_absolute(har_file, cwd),
        base_path=base_path,
        output=_absolute(output or DEFAULT_OUTPUT, cwd),
        fmt=fmt,
        title=title or DEFAULT_TITLE,
        version=version or DEFAULT_VERSION,
        server_url=server_url or DEFAULT_SERVER_URL,
    )


def _absolute(path: str, cwd: str) -> str:
    return path if os.path.isabs(path) else os.path.abspath(os.path.join(cwd, path))


def _format_from_output(output: Optional[str]) -> str:
    if output and output.lower().endswith(".json"):
        return "json"
    return "yaml"
