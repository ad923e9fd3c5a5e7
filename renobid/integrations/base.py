from abc import ABC, abstractmethod

from renobid.common.logging import get_logger


class BaseIntegration(ABC):
    """Common base for outbound provider clients.

    Clients never raise on provider errors; they return a result dict whose
    ``status`` is ``"sent"`` or ``"failed"``.
    """

    def __init__(self, name: str):
        self.name = name
        self.logger = get_logger(f"integrations.{name}")

    @property
    @abstractmethod
    def is_mock(self) -> bool:
        """True when credentials are placeholders and calls are only logged."""

    @abstractmethod
    async def health_check(self) -> bool:
        """Return True when the provider is reachable and credentials work."""
        ...
