"""
Startup configuration for the autoscaler.

A value is taken from, in order: the command line, a `CSCALE_*` environment variable
(a `.env` file is loaded first), the `autoscale:` section of the YAML config file,
and finally the built-in defaults.
"""

import yaml

from pathlib import Path
from typing import Any, Dict, List, Optional

from composescale.auto_scaling.policy import ScalingPolicy
from composescale.constants import DEFAULT_CONFIG_FILE, ENV_PREFIX
from composescale.errors import ConfigurationError
from composescale.utils.data import get_config, resolve_env_variables

# Policy field -> parser for raw values coming from env vars or YAML.
POLICY_FIELDS = {
    "strategy": str,
    "cpu_threshold": float,
    "mem_threshold": float,
    "min_replicas": int,
    "max_replicas": int,
    "interval": float,
}

def _normalize_keys(section: Dict[str, Any]) -> Dict[str, Any]:
    return {str(k).replace("-", "_").lower(): v for k, v in section.items()}

def load_config_file(path=None) -> Dict[str, Any]:
    """
    Reads the `autoscale:` section of a YAML file with `${VAR}` references resolved.
    Without a path, `autoscale.yaml` in the working directory is used if it exists.
    """

    if path is None:
        if not Path(DEFAULT_CONFIG_FILE).is_file():
            return {}
        path = DEFAULT_CONFIG_FILE

    try:
        with Path(path).open() as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigurationError(f"cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"invalid YAML in {path}: {e}") from e

    section = data.get("autoscale", {}) if isinstance(data, dict) else None
    if not isinstance(section, dict):
        raise ConfigurationError(f"'autoscale' in {path} must be a mapping")

    return _normalize_keys(resolve_env_variables(section))

def _parse(field, parser, raw, source):
    try:
        # YAML `true` is an int subclass; it is never a number here.
        if isinstance(raw, bool) and parser is not str:
            raise ValueError(raw)
        # "3.0" and 3.0 are accepted for integer fields, 2.5 is not truncated.
        if parser is int and isinstance(raw, (str, float)):
            value = float(raw)
            if not value.is_integer():
                raise ValueError(raw)
            return int(value)
        return parser(raw)
    except (TypeError, ValueError):
        raise ConfigurationError(f"invalid value for {field} from {source}: {raw!r}") from None

def load_policy(overrides: Optional[Dict[str, Any]] = None, file_config: Optional[Dict[str, Any]] = None) -> ScalingPolicy:
    """Merges every configuration source into a validated ScalingPolicy."""

    overrides = overrides or {}
    file_config = file_config or {}
    values = {}

    for field, parser in POLICY_FIELDS.items():
        env_name = f"{ENV_PREFIX}{field.upper()}"

        if overrides.get(field) is not None:
            values[field] = _parse(field, parser, overrides[field], "command line")
        elif (env_value := get_config(env_name)) is not None:
            values[field] = _parse(field, parser, env_value, env_name)
        elif file_config.get(field) is not None:
            values[field] = _parse(field, parser, file_config[field], "config file")

    return ScalingPolicy(**values)

def load_services(cli_services: Optional[List[str]] = None, file_config: Optional[Dict[str, Any]] = None) -> List[str]:
    """Target services: command line first, then `CSCALE_SERVICES` (comma separated), then the config file."""

    if cli_services:
        return list(cli_services)

    env_value = get_config(f"{ENV_PREFIX}SERVICES")
    if env_value:
        return [s.strip() for s in env_value.split(",") if s.strip()]

    services = (file_config or {}).get("services") or []
    if isinstance(services, str):
        services = [services]
    if not isinstance(services, list):
        raise ConfigurationError("'services' in the config file must be a list")
    return [str(s) for s in services]
