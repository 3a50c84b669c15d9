"""
Project constants definitions
"""
from pathlib import Path

# ============================================================
# Installation Layout
# ============================================================

INSTALL_DIR = Path(__file__).resolve().parent.parent.parent
DEFAULT_STORE_FILE = INSTALL_DIR / "ec2.json"
DEFAULT_CONFIG_FILE = INSTALL_DIR / "config.toml"
STORE_FILE_MODE = 0o600

# ============================================================
# Profile Store
# ============================================================

FALLBACK_TAG = "noNameTag"
NAME_TAG_KEY = "Name"

# ============================================================
# Discovery
# ============================================================

ROLE_SESSION_NAME = "ec2-ssh"
DEFAULT_MAX_WORKERS = 8
RUNNING_FILTER = {"Name": "instance-state-name", "Values": ["running"]}

# ============================================================
# Connection Defaults
# ============================================================

DEFAULT_SSH_USER = "ec2-user"
DEFAULT_SSH_KEY = "~/.ssh/id_rsa"
DEFAULT_SSH_BINARY = "ssh"
SSH_CONFIG_PATH = "~/.ssh/config"

# Exit status of a session closed by Ctrl+C, not a connection failure
USER_INTERRUPT_EXIT_CODE = 130

# ============================================================
# Environment
# ============================================================

ENV_PREFIX = "EC2SSH_"
COMPLETION_ENV = "COMP_LINE"
