"""
ec2ssh - connect to EC2 instances by a short, stable name

Discovers running instances across regions and accounts and keeps a local
profile store that maps instance ids, public addresses and de-duplicated
name tags to SSH connection profiles:
- Instance discovery (multiple regions, cross-account roles)
- Stable name tags ("web", "web (1)", ...)
- One-time credential prompts per instance
- Bash tab completion
"""

__version__ = "0.1.0"

from .core import (
    ProfileNotFoundError,
    StoreError,
    setup_logging,
    get_logger,
)

from .domain.profiles import (
    Profile,
    ProfileUpdate,
    ProfileStore,
)

from .domain.discovery import (
    DiscoveryService,
    DiscoveryTarget,
)

from .domain.connect import ConnectionOrchestrator

from .infrastructure.state import JsonFileBackend
from .infrastructure.session import SubprocessSessionLauncher

__all__ = [
    # Version
    "__version__",
    # Errors
    "ProfileNotFoundError",
    "StoreError",
    # Logging
    "setup_logging",
    "get_logger",
    # Profiles
    "Profile",
    "ProfileUpdate",
    "ProfileStore",
    "JsonFileBackend",
    # Discovery
    "DiscoveryService",
    "DiscoveryTarget",
    # Connect
    "ConnectionOrchestrator",
    "SubprocessSessionLauncher",
]
