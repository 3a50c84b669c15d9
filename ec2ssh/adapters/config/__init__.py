"""
Configuration loading
"""
from .loader import ConfigLoader, Settings

__all__ = ["ConfigLoader", "Settings"]
