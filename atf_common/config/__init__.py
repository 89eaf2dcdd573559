"""Configuration helpers for atf_common."""

from .env import ENV_PREFIX, env_flag, env_name, read_env

__all__ = [
    "ENV_PREFIX",
    "env_flag",
    "env_name",
    "read_env",
]
