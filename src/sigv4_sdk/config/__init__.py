"""
Configuration management for SigV4 Python SDK
"""

from .settings import (
    ENV_PREFIX,
    LoggingSettings,
    SignerSettings,
    load_settings_from_dict,
    load_settings_from_env,
    load_settings_from_file,
    load_settings_from_json,
)

__all__ = [
    'ENV_PREFIX',
    'LoggingSettings',
    'SignerSettings',
    'load_settings_from_dict',
    'load_settings_from_env',
    'load_settings_from_file',
    'load_settings_from_json',
]
