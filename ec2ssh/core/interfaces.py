"""
Core interfaces for dependency injection
"""
from abc import ABC, abstractmethod
from typing import Dict, Any, Optional


class StoreBackend(ABC):
    """Durable storage for the raw profile store document"""
    
    @abstractmethod
    def load(self) -> Optional[Dict[str, Any]]:
        """Load the stored document, None if nothing was saved yet"""
        pass
    
    @abstractmethod
    def save(self, data: Dict[str, Any]) -> None:
        """Persist the document; must not return before it is durable"""
        pass


class SessionLauncher(ABC):
    """Remote shell session launcher interface"""
    
    @abstractmethod
    def launch(self, address: str, user: str, key_path: str) -> int:
        """Run an interactive session and return its exit status"""
        pass


class PromptProvider(ABC):
    """User prompt interface"""
    
    @abstractmethod
    def prompt(self, message: str, default: Optional[str] = None) -> str:
        """Prompt user for input"""
        pass
    
    @abstractmethod
    def confirm(self, message: str, default: bool = False) -> bool:
        """Prompt user for confirmation"""
        pass
    
    def info(self, message: str) -> None:
        """Display info message"""
        pass
    
    def error(self, message: str) -> None:
        """Display error message"""
        pass
