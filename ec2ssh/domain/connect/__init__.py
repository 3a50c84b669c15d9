"""
Connect domain module
"""
from .service import ConnectionOrchestrator

__all__ = ["ConnectionOrchestrator"]
