"""
Display tag disambiguation

Several instances may carry the same human-assigned name. Each one gets a
stable alias: the bare name for the first one seen, "name (n)" for the
others, where n is the number of other instances already sharing the name.
"""
import re
from typing import Dict, Iterable

from .models import Profile


def build_tag_map(profiles: Iterable[Profile]) -> Dict[str, str]:
    """Project stored profiles to a tag -> id map"""
    tag_map: Dict[str, str] = {}
    for profile in profiles:
        if profile.tag:
            tag_map[profile.tag] = profile.id
    return tag_map


def tag_pattern(base_tag: str) -> re.Pattern[str]:
    """Pattern matching "base" or "base (<n>)" exactly"""
    return re.compile(rf"{re.escape(base_tag)}(?: \((\d+)\))?")


def resolve_tag(tag_map: Dict[str, str], instance_id: str, base_tag: str) -> str:
    """
    Return a display tag for instance_id that no other instance owns.
    
    Args:
        tag_map: Current tag -> id projection
        instance_id: Instance the tag belongs to
        base_tag: Un-suffixed display name
    
    Returns:
        The alias already owned by instance_id for this base tag, else
        base_tag if unused, else "base_tag (n)" with n the number of other
        instances sharing the base tag. Ordinals freed by deletions are not
        reused; when the counted ordinal is still held by another instance
        (possible after a deletion) the next free one is taken.
    """
    pattern = tag_pattern(base_tag)
    others = 0
    for tag, owner in tag_map.items():
        if not pattern.fullmatch(tag):
            continue
        if owner == instance_id:
            return tag
        others += 1

    if others == 0:
        return base_tag

    ordinal = others
    candidate = f"{base_tag} ({ordinal})"
    while tag_map.get(candidate, instance_id) != instance_id:
        ordinal += 1
        candidate = f"{base_tag} ({ordinal})"
    return candidate
