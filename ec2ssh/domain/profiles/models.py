"""
Profile domain models
"""
from dataclasses import dataclass, field, fields
from typing import Optional, Dict, Any


@dataclass
class Profile:
    """Connection record for one remote instance"""
    id: str
    address: Optional[str] = None
    user: Optional[str] = None
    key_path: Optional[str] = None
    tag: Optional[str] = None
    
    @property
    def has_credentials(self) -> bool:
        """True when both login user and key path are known"""
        return bool(self.user and self.key_path)
    
    def aliases(self) -> list[str]:
        """Non-empty lookup keys other than the id"""
        return [alias for alias in (self.address, self.tag) if alias]
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "id": self.id,
            "address": self.address,
            "user": self.user,
            "key_path": self.key_path,
            "tag": self.tag,
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Profile":
        """
        Create from dictionary.
        
        Accepts the legacy "ip"/"keyPath" field names.
        """
        return cls(
            id=data["id"],
            address=data.get("address", data.get("ip")),
            user=data.get("user"),
            key_path=data.get("key_path", data.get("keyPath")),
            tag=data.get("tag"),
        )


@dataclass
class ProfileUpdate:
    """
    Partial update of a profile.
    
    A field left as None means "leave unchanged". Empty strings carry no
    information either and are normalized to None, so an update can never
    erase a known value.
    """
    address: Optional[str] = None
    user: Optional[str] = None
    key_path: Optional[str] = None
    tag: Optional[str] = None
    
    def __post_init__(self) -> None:
        for f in fields(self):
            if not getattr(self, f.name):
                setattr(self, f.name, None)
    
    def changes(self) -> Dict[str, str]:
        """Fields that carry a value"""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


@dataclass
class StoreState:
    """In-memory image of the persisted store document"""
    items: Dict[str, Profile] = field(default_factory=dict)
    alias_index: Dict[str, str] = field(default_factory=dict)
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "items": {pid: profile.to_dict() for pid, profile in self.items.items()},
            "alias_index": dict(self.alias_index),
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StoreState":
        """
        Create from dictionary.
        
        The alias index is derived data: it is rebuilt from the profiles,
        keeping only stored entries that still point at a known id.
        """
        items: Dict[str, Profile] = {}
        for pid, raw in (data.get("items") or {}).items():
            raw = dict(raw)
            raw.setdefault("id", pid)
            items[pid] = Profile.from_dict(raw)
        
        alias_index: Dict[str, str] = {}
        stored_index = data.get("alias_index", data.get("map")) or {}
        for alias, pid in stored_index.items():
            if alias and pid in items:
                alias_index[alias] = pid
        for pid, profile in items.items():
            for alias in profile.aliases():
                alias_index.setdefault(alias, pid)
        
        return cls(items=items, alias_index=alias_index)
