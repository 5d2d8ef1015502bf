"""
Connection configuration utilities.

Usage:
    from seqapi.config import load_connection_config

    config = load_connection_config("local")
"""

from seqapi.config.loader import (
    ConnectionConfig,
    get_config_path,
    load_connection_config,
)

__all__ = ["ConnectionConfig", "load_connection_config", "get_config_path"]
