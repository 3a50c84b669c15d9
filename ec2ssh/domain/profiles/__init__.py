"""
Profile domain module
"""
from .models import Profile, ProfileUpdate, StoreState
from .store import ProfileStore
from .tags import build_tag_map, resolve_tag

__all__ = [
    "Profile",
    "ProfileUpdate",
    "StoreState",
    "ProfileStore",
    "build_tag_map",
    "resolve_tag",
]
