"""
Configuration module for layerkv.

Uses pydantic-settings for environment variable loading.
"""

from layerkv.config.settings import Settings
from layerkv.config.sources import ConfigFileError

__all__ = ["ConfigFileError", "Settings"]
