from .launcher import SubprocessSessionLauncher

__all__ = ["SubprocessSessionLauncher"]
