"""
Connection orchestration - resolve, complete credentials, run ssh
"""
from typing import Optional, Tuple

from ...core.interfaces import PromptProvider, SessionLauncher
from ...core.constants import DEFAULT_SSH_KEY, DEFAULT_SSH_USER, USER_INTERRUPT_EXIT_CODE
from ...core.exceptions import ConnectionError, ProfileNotFoundError
from ...core.logging import get_logger
from ...core.utils import load_ssh_config, split_suggestion
from ..profiles.models import Profile
from ..profiles.store import ProfileStore

logger = get_logger(__name__)


class ConnectionOrchestrator:
    """
    User workflow for SSH connections.

    Resolves an identifier through the profile store, asks for missing
    credentials once, runs the session and offers to forget the profile
    when the session fails.
    """

    def __init__(
        self,
        store: ProfileStore,
        launcher: SessionLauncher,
        prompts: PromptProvider,
        default_user: str = DEFAULT_SSH_USER,
        default_key: str = DEFAULT_SSH_KEY,
        ssh_config_path: Optional[str] = None,
    ):
        self.store = store
        self.launcher = launcher
        self.prompts = prompts
        self.default_user = default_user
        self.default_key = default_key
        self.ssh_config_path = ssh_config_path

    def resolve(self, identifier: str) -> Profile:
        """
        Find the profile for an identifier.

        Besides ids, tags and addresses, a raw completion suggestion
        "tag:address" is accepted.

        Raises:
            ProfileNotFoundError: If no profile matches
        """
        profile = self.store.get_profile(identifier)
        if profile is None and ":" in identifier:
            for part in split_suggestion(identifier):
                profile = self.store.get_profile(part)
                if profile is not None:
                    break
        if profile is None:
            raise ProfileNotFoundError(identifier)
        return profile

    def connect(self, identifier: str) -> int:
        """
        Connect to the instance matching the identifier.

        Prompts for user and key path if this is a connection to an
        unknown host.

        Args:
            identifier: Instance id, tag, address or completion suggestion

        Returns:
            Exit status of the ssh session

        Raises:
            ProfileNotFoundError: If the identifier is unknown
            StoreError: If the profile store cannot be persisted
            ConnectionError: If no address is known or ssh cannot be started
        """
        profile = self.resolve(identifier)
        if not profile.address:
            raise ConnectionError(f"No address known for {profile.id}, refresh the instance list first")

        if not profile.has_credentials:
            self.prompts.info("New connection...")
            user, key_path = self._ask_credentials(profile)
            profile = self.store.update_profile(profile.id, user=user, key_path=key_path)

        logger.info("Connecting to %s (%s@%s)", profile.id, profile.user, profile.address)
        code = self.launcher.launch(profile.address, profile.user, profile.key_path)

        if code not in (0, USER_INTERRUPT_EXIT_CODE):
            self._handle_failure(profile, code)
        return code

    def _ask_credentials(self, profile: Profile) -> Tuple[str, str]:
        """Prompt for missing credentials, suggesting known values"""
        default_user, default_key = self._credential_defaults(profile)
        user = profile.user or self.prompts.prompt("SSH User", default=default_user)
        key_path = profile.key_path or self.prompts.prompt("SSH Key", default=default_key)
        return user, key_path

    def _credential_defaults(self, profile: Profile) -> Tuple[str, str]:
        """Configured defaults, overridden by ~/.ssh/config for the address"""
        user, key_path = self.default_user, self.default_key
        if not profile.address:
            return user, key_path

        if self.ssh_config_path:
            entry = load_ssh_config(profile.address, self.ssh_config_path)
        else:
            entry = load_ssh_config(profile.address)
        return entry.get("user", user), entry.get("key_file", key_path)

    def _handle_failure(self, profile: Profile, code: int) -> None:
        """Offer to delete a profile whose session failed"""
        logger.warning("SSH session to %s exited with status %d", profile.id, code)
        self.prompts.error("SSH connection failed")
        if self.prompts.confirm("Delete cached profile", default=False):
            self.store.delete_profile(profile.id)
            self.prompts.info(f"Deleted {profile.id}")
