"""
Connection configuration utilities.

This module loads Seq server connection profiles from a YAML configuration
file at the project root, so scripts don't embed server addresses or API keys.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConnectionConfig:
    """Settings needed to construct a SeqApiClient."""

    server_url: str
    api_key: Optional[str] = None
    use_default_credentials: bool = True


def get_config_path() -> Path:
    """
    Get the path to the connection configuration file.

    Looks for seq_config.yaml in the current working directory (project root).
    """
    return Path(os.getcwd()) / "seq_config.yaml"


def load_connection_config(profile: str) -> ConnectionConfig:
    """
    Load a connection profile from the YAML file at project root.

    Args:
        profile: The key identifying the server profile in the config file

    Returns:
        ConnectionConfig for the profile

    Raises:
        FileNotFoundError: If seq_config.yaml doesn't exist
        ValueError: If the profile or its server_url is missing
        RuntimeError: If the file can't be read or parsed
    """
    config_path = get_config_path()
    logger.debug(f"Loading config from: {config_path}")

    if not config_path.exists():
        raise FileNotFoundError(
            f"seq_config.yaml not found at {config_path}. "
            "Copy seq_config.yaml.example to seq_config.yaml and configure your servers."
        )

    try:
        with open(config_path, "r") as f:
            config = yaml.safe_load(f) or {}

        profile_config = config.get(profile, {})

        if not profile_config:
            raise ValueError(
                f"Profile '{profile}' not found in {config_path}. "
                f"Please add the server configuration."
            )

        server_url = profile_config.get("server_url")
        if not server_url:
            raise ValueError(
                f"Missing required field for profile '{profile}': server_url. "
                f"Please add the Seq server address to {config_path}"
            )

        return ConnectionConfig(
            server_url=server_url,
            api_key=profile_config.get("api_key") or None,
            use_default_credentials=bool(
                profile_config.get("use_default_credentials", True)
            ),
        )
    except ValueError:
        raise
    except Exception as e:
        raise RuntimeError(f"Error loading Seq config: {e}") from e
