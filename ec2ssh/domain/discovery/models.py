"""
Discovery domain models
"""
from dataclasses import dataclass
from typing import Optional, Dict, Any


@dataclass(frozen=True)
class DiscoveryTarget:
    """One region, optionally reached through an assumed role"""
    region: str
    role_arn: Optional[str] = None
    
    def __str__(self) -> str:
        if self.role_arn:
            return f"{self.region} ({self.role_arn})"
        return self.region


@dataclass
class DiscoveredInstance:
    """Running instance reachable over a public address"""
    instance_id: str
    address: str
    name: str
    
    @classmethod
    def from_api(cls, raw: Dict[str, Any], name: str) -> "DiscoveredInstance":
        """Create from a describe_instances instance entry"""
        return cls(
            instance_id=raw["InstanceId"],
            address=raw["PublicIpAddress"],
            name=name,
        )
