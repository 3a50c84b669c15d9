"""
Core utility functions
"""
import paramiko
from pathlib import Path
from typing import Dict, Any

from .constants import SSH_CONFIG_PATH
from .exceptions import ConfigError


# ============================================================
# SSH Config Management
# ============================================================

def load_ssh_config(hostname: str, config_path: str = SSH_CONFIG_PATH) -> Dict[str, Any]:
    """
    Load configuration for specified Host from ~/.ssh/config.
    
    Only the keys explicitly set for the host are returned, so callers
    can tell a configured user or identity file from ssh's own defaults.
    
    Args:
        hostname: Host name or address to look up
        config_path: SSH client configuration file
    
    Returns:
        Dictionary with any of user, key_file
    
    Raises:
        ConfigError: If the ssh config file cannot be parsed
    """
    path = Path(config_path).expanduser()
    if not path.exists():
        return {}

    try:
        ssh_config = paramiko.SSHConfig.from_path(str(path))
    except Exception as e:
        raise ConfigError(f"Failed to parse {config_path}: {e}") from e
    entry = ssh_config.lookup(hostname)

    result: Dict[str, Any] = {}
    if entry.get("user"):
        result["user"] = entry["user"]
    if entry.get("identityfile"):
        result["key_file"] = entry["identityfile"][0]
    return result


# ============================================================
# Path Resolution Utilities
# ============================================================

def resolve_local_path(path: str) -> Path:
    """Resolve local path, expand ~ and other symbols"""
    return Path(path).expanduser()


def split_suggestion(value: str) -> tuple[str, str]:
    """
    Split a completion suggestion "tag:address" into its parts.
    
    The address never contains ':' (IPv4), so the last separator wins and
    tags containing ':' survive.
    """
    if ":" not in value:
        return value, ""
    tag, address = value.rsplit(":", 1)
    return tag, address
