from abc import ABC, abstractmethod
from typing import List, Optional

from ..schemas import JobListing, ProviderStatus


class ProviderError(Exception):
    """The job provider could not serve the request."""


class RateLimitError(ProviderError):
    def __init__(self, message: str, retry_after: Optional[str] = None):
        super().__init__(message)
        self.retry_after = retry_after


class ProviderAuthError(ProviderError):
    pass


class ProviderRequestError(ProviderError):
    pass


class JobProvider(ABC):
    @abstractmethod
    def search(
        self,
        keyword: str,
        location: str = "",
        experience: float = 0,
        page: int = 1,
        num_pages: int = 1,
        company: Optional[str] = None,
        platform: Optional[str] = None,
    ) -> List[JobListing]:
        pass

    def status(self) -> ProviderStatus:
        return ProviderStatus(status="UNKNOWN")
