"""Connection lifecycle shared by cluster clients."""

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional
import structlog

logger = structlog.get_logger(__name__)


class BaseClient(ABC):
    """A client that must be connected before it can be queried."""

    def __init__(self, config: Dict[str, Any], name: Optional[str] = None):
        self.config = config
        self.name = name or self.__class__.__name__
        self._connected = False
        self.logger = logger.bind(client=self.name)

    @abstractmethod
    def connect(self) -> None:
        """Load credentials and build the underlying API clients."""

    @abstractmethod
    def disconnect(self) -> None:
        """Release the underlying API clients."""

    @property
    def is_connected(self) -> bool:
        return self._connected
