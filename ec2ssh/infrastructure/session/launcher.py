"""
SSH child process launcher
"""
import shutil
import signal
import subprocess
from typing import List

from ...core.interfaces import SessionLauncher
from ...core.constants import DEFAULT_SSH_BINARY, USER_INTERRUPT_EXIT_CODE
from ...core.exceptions import ConnectionError
from ...core.logging import get_logger
from ...core.utils import resolve_local_path

logger = get_logger(__name__)


class SubprocessSessionLauncher(SessionLauncher):
    """Runs the system ssh client attached to the current terminal"""
    
    def __init__(self, ssh_binary: str = DEFAULT_SSH_BINARY):
        self.ssh_binary = ssh_binary
    
    def build_command(self, address: str, user: str, key_path: str) -> List[str]:
        """Build the ssh command line"""
        return [
            self.ssh_binary,
            "-i", str(resolve_local_path(key_path)),
            f"{user}@{address}",
        ]
    
    def launch(self, address: str, user: str, key_path: str) -> int:
        """
        Run ssh until it exits.
        
        Returns:
            ssh exit status; a session ended by a signal reports
            128 + signal number, Ctrl+C always reports 130
        
        Raises:
            ConnectionError: If the ssh binary cannot be started
        """
        if shutil.which(self.ssh_binary) is None:
            raise ConnectionError(f"SSH client not found: {self.ssh_binary}")
        
        command = self.build_command(address, user, key_path)
        logger.debug("Running %s", " ".join(command))
        
        try:
            process = subprocess.Popen(command)
        except OSError as e:
            raise ConnectionError(f"Failed to start {self.ssh_binary}: {e}") from e
        
        try:
            code = process.wait()
        except KeyboardInterrupt:
            # The child shares our terminal and received the same SIGINT
            process.wait()
            return USER_INTERRUPT_EXIT_CODE
        
        if code < 0:
            signum = -code
            if signum == signal.SIGINT:
                return USER_INTERRUPT_EXIT_CODE
            return 128 + signum
        return code
