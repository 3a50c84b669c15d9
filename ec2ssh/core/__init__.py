"""
Core infrastructure layer
"""
from .constants import *
from .exceptions import *
from .logging import setup_logging, get_logger, get_stdout_console, get_stderr_console
from .interfaces import StoreBackend, SessionLauncher, PromptProvider
from .utils import (
    load_ssh_config,
    resolve_local_path,
    split_suggestion,
)

__all__ = [
    "Ec2SshError",
    "ConfigError",
    "StoreError",
    "ProfileNotFoundError",
    "DiscoveryError",
    "ConnectionError",
    "setup_logging",
    "get_logger",
    "get_stdout_console",
    "get_stderr_console",
    "StoreBackend",
    "SessionLauncher",
    "PromptProvider",
    "load_ssh_config",
    "resolve_local_path",
    "split_suggestion",
]
