from abc import ABC, abstractmethod


class IWalletSignatureVerifier(ABC):
    @abstractmethod
    def verify(self, *, wallet_address: str, message: str, signature: str) -> bool:
        """Check a base58 signature of message against a base58 wallet public key."""
        pass
