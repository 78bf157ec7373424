from .data import get_config, load_env_file, resolve_env_variables

__all__ = ["get_config", "load_env_file", "resolve_env_variables"]
