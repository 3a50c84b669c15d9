"""
Identity & profile store - business logic
"""
import copy
from typing import Dict, Optional

from ...core.interfaces import StoreBackend
from ...core.logging import get_logger
from .models import Profile, ProfileUpdate, StoreState
from .tags import build_tag_map, resolve_tag

logger = get_logger(__name__)


class ProfileStore:
    """
    Persistent mapping from any known identifier to a connection profile.

    Profiles are keyed by the provider-issued instance id. Addresses and
    display tags are secondary aliases kept in a derived index. Every
    mutating call is flushed to the backend before it returns.

    Not safe for concurrent writers: when two processes share a store
    file, the last flush wins.
    """

    def __init__(self, backend: StoreBackend):
        """
        Initialize profile store.

        Args:
            backend: Durable storage for the store document

        Raises:
            StoreError: If the stored document cannot be read
        """
        self.backend = backend
        data = backend.load()
        self._state = StoreState.from_dict(data) if data else StoreState()
        self._tag_map: Dict[str, str] = {}
        self._refresh_tag_map()

    @property
    def state(self) -> StoreState:
        """Current in-memory store state"""
        return self._state

    def profiles(self) -> list[Profile]:
        """All known profiles"""
        return list(self._state.items.values())

    # ============================================================
    # Read operations
    # ============================================================

    def get_profile(self, identifier: str) -> Optional[Profile]:
        """
        Retrieve the profile for an identifier.

        Args:
            identifier: Instance id, (suffixed) tag or address

        Returns:
            Profile or None if unknown
        """
        if not identifier:
            return None
        instance_id = self._state.alias_index.get(identifier, identifier)
        return self._state.items.get(instance_id)

    def has_credentials(self, identifier: str) -> bool:
        """Check if the profile for identifier has a user and key path set"""
        profile = self.get_profile(identifier)
        return profile is not None and profile.has_credentials

    def resolve_tag(self, instance_id: str, base_tag: str) -> str:
        """Return a collision-free display tag for instance_id"""
        return resolve_tag(self._tag_map, instance_id, base_tag)

    # ============================================================
    # Mutations
    # ============================================================

    def update_profile(
        self,
        instance_id: str,
        address: Optional[str] = None,
        user: Optional[str] = None,
        key_path: Optional[str] = None,
        tag: Optional[str] = None,
    ) -> Profile:
        """
        Update a stored profile or create a new one.

        Missing or empty values never replace existing values. A supplied
        tag is disambiguated before it is stored.

        Args:
            instance_id: Instance id (primary key)
            address: Current public address
            user: SSH login user
            key_path: SSH private key path
            tag: Base display tag

        Returns:
            The stored profile

        Raises:
            ValueError: If instance_id is empty
            StoreError: If the store cannot be persisted
        """
        if not instance_id:
            raise ValueError("instance id must not be empty")

        update = ProfileUpdate(address=address, user=user, key_path=key_path, tag=tag)
        if update.tag is not None:
            update.tag = self.resolve_tag(instance_id, update.tag)

        state = copy.deepcopy(self._state)
        profile = state.items.get(instance_id)
        if profile is None:
            profile = Profile(id=instance_id)
            state.items[instance_id] = profile
            logger.info("Adding profile %s", instance_id)
        else:
            logger.debug("Updating profile %s with %s", instance_id, sorted(update.changes()))

        for name, value in update.changes().items():
            previous = getattr(profile, name)
            setattr(profile, name, value)
            if name in ("address", "tag") and previous != value:
                self._move_alias(state, instance_id, name, previous, value)

        self._commit(state)
        return profile

    def delete_profile(self, instance_id: str) -> bool:
        """
        Delete the stored profile for an instance id.

        Unknown ids are ignored.

        Returns:
            True if a profile or alias was removed
        """
        state = copy.deepcopy(self._state)
        removed = state.items.pop(instance_id, None) is not None
        stale = [alias for alias, owner in state.alias_index.items() if owner == instance_id]
        for alias in stale:
            del state.alias_index[alias]

        if not removed and not stale:
            return False

        logger.info("Deleting %s", instance_id)
        self._commit(state)
        return True

    # ============================================================
    # Internals
    # ============================================================

    def _move_alias(
        self,
        state: StoreState,
        instance_id: str,
        name: str,
        previous: Optional[str],
        current: str,
    ) -> None:
        """
        Point alias current at instance_id and drop its previous alias.

        An address taken over from another instance is cleared on that
        instance's profile, so the index stays derivable from the profiles.
        """
        index = state.alias_index
        if previous and index.get(previous) == instance_id:
            del index[previous]

        owner = index.get(current)
        if owner is not None and owner != instance_id:
            logger.info("Alias %r moves from %s to %s", current, owner, instance_id)
            displaced = state.items.get(owner)
            if displaced is not None and getattr(displaced, name) == current:
                setattr(displaced, name, None)
        index[current] = instance_id

    def _refresh_tag_map(self) -> None:
        """Rebuild the tag -> id projection"""
        self._tag_map = build_tag_map(self._state.items.values())

    def _commit(self, state: StoreState) -> None:
        """Flush state to the backend, then make it current"""
        self.backend.save(state.to_dict())
        self._state = state
        self._refresh_tag_map()
