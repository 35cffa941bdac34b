"""
Core interfaces and abstract base classes for the CCRM platform.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, TypeVar, Generic


T = TypeVar('T')


class Repository(ABC, Generic[T]):
    """Abstract base class for keyed registries."""
    
    @abstractmethod
    def find(self, key: str) -> Optional[T]:
        """Find an entity by its registry key."""
        pass
    
    @abstractmethod
    def list_all(self) -> List[T]:
        """Snapshot of every entity in the registry."""
        pass
    
    @abstractmethod
    def count(self) -> int:
        """Number of entities in the registry."""
        pass
    
    @abstractmethod
    def clear(self) -> None:
        """Remove every entity."""
        pass
