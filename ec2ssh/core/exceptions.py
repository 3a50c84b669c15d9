"""
Unified exception definitions
"""


class Ec2SshError(Exception):
    """Base exception class"""
    pass


class ConfigError(Ec2SshError):
    """Configuration error"""
    pass


class StoreError(Ec2SshError):
    """Profile store could not be read or written"""
    pass


class ProfileNotFoundError(Ec2SshError):
    """No profile is known for an identifier"""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f'No EC2 instance found for identifier "{identifier}"')


class DiscoveryError(Ec2SshError):
    """Discovery of one region/role target failed"""
    pass


class ConnectionError(Ec2SshError):
    """Connection error"""
    pass
