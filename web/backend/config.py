#!/usr/bin/env python3
"""
Configuration access for the web application.
"""

import os
from functools import lru_cache

from core.config_loader import AppConfig, load_config


@lru_cache()
def get_config() -> AppConfig:
    """
    Get application configuration with caching.

    Loads from the YAML file named by CHOREMATCH_CONFIG (default config.yaml)
    and applies environment variable overrides. Result is cached for performance.

    Returns:
        AppConfig: The application configuration.
    """
    return load_config(os.environ.get("CHOREMATCH_CONFIG", "config.yaml"))
