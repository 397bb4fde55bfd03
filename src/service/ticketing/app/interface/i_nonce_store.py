from abc import ABC, abstractmethod


class INonceStore(ABC):
    """Short-lived store for wallet login nonces."""

    @abstractmethod
    async def issue(self, *, ttl_seconds: int) -> int:
        """Create and remember a new nonce."""
        pass

    @abstractmethod
    async def consume(self, nonce: int) -> bool:
        """Forget the nonce; True if it was outstanding and unexpired."""
        pass
