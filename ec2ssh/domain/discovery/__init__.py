"""
Discovery domain module
"""
from .models import DiscoveryTarget, DiscoveredInstance
from .service import DiscoveryService, name_tag

__all__ = ["DiscoveryTarget", "DiscoveredInstance", "DiscoveryService", "name_tag"]
