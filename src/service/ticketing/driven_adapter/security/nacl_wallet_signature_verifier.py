import base58
from nacl.exceptions import BadSignatureError, CryptoError
from nacl.signing import VerifyKey

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_wallet_signature_verifier import (
    IWalletSignatureVerifier,
)


class NaclWalletSignatureVerifier(IWalletSignatureVerifier):
    """Ed25519 check of a Solana wallet signature.

    The wallet address is the base58 public key, the signature is the base58
    detached signature of the UTF-8 message.
    """

    def verify(self, *, wallet_address: str, message: str, signature: str) -> bool:
        try:
            public_key = base58.b58decode(wallet_address)
            signature_bytes = base58.b58decode(signature)
        except ValueError:
            Logger.base.warning(f'🔐 [AUTH] Undecodable key or signature for {wallet_address}')
            return False

        if len(public_key) != 32 or len(signature_bytes) != 64:
            return False

        try:
            VerifyKey(public_key).verify(message.encode('utf-8'), signature_bytes)
        except (BadSignatureError, CryptoError):
            return False
        return True
