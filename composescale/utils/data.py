"""Manages environment and configuration value lookups."""

import os
import re

from dotenv import load_dotenv

_ENV_REFERENCE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")

def load_env_file(path=".env"):
    """Loads a dotenv file into the process environment without overriding variables already set."""

    return load_dotenv(path, override=False)

def get_config(config_name: str, cls: object = None, default=None):
    """Retrieves a configuration value from environment variables or a class attribute."""

    ret = os.getenv(config_name)
    if ret is not None:
        return ret

    if cls is None:
        return default

    return getattr(cls, config_name.lower(), default)

def resolve_env_variables(value):
    """
    Substitutes `${VAR}` and `${VAR:-fallback}` references with environment values,
    walking nested dicts and lists. Unset variables without a fallback resolve to an empty string.
    """

    if isinstance(value, dict):
        return {k: resolve_env_variables(v) for k, v in value.items()}
    if isinstance(value, list):
        return [resolve_env_variables(v) for v in value]
    if not isinstance(value, str):
        return value

    return _ENV_REFERENCE.sub(lambda m: os.getenv(m.group(1), m.group(2) or ""), value)
