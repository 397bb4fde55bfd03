"""
Wallet auth client for the /api/auth endpoints.

Holds the JWT after login and attaches it as x-auth-token on every
authorized request. A 401 from the server clears it.
"""

import time
from typing import Any, Callable, List, Optional

import anyio
import base58
import httpx
import jwt
from nacl.signing import SigningKey

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger


AuthListener = Callable[[Optional[dict[str, Any]]], Any]


class AuthClient:
    def __init__(
        self,
        base_url: str,
        *,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.token: Optional[str] = None
        self.user: Optional[dict[str, Any]] = None
        self._listeners: List[AuthListener] = []
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> 'AuthClient':
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ========== Auth flows ==========

    async def get_nonce(self) -> dict[str, Any]:
        response = await self.request('GET', '/api/auth/nonce', authorized=False)
        return response.json()

    async def login_with_wallet(self, signing_key: SigningKey) -> dict[str, Any]:
        wallet_address = base58.b58encode(bytes(signing_key.verify_key)).decode()
        nonce = await self.get_nonce()
        signed = signing_key.sign(nonce['message'].encode('utf-8'))
        response = await self.request(
            'POST',
            '/api/auth/login',
            authorized=False,
            json={
                'wallet_address': wallet_address,
                'signature': base58.b58encode(signed.signature).decode(),
                'message': nonce['message'],
            },
        )
        return self._store_login(response.json())

    async def login_test(
        self, *, wallet_address: Optional[str] = None, email: Optional[str] = None
    ) -> dict[str, Any]:
        response = await self.request(
            'POST',
            '/api/auth/login-test',
            authorized=False,
            json={'wallet_address': wallet_address, 'email': email},
        )
        return self._store_login(response.json())

    async def check_admin(self) -> bool:
        if not self.token:
            return False
        response = await self.request('GET', '/api/auth/admin-check')
        return bool(response.json().get('is_admin'))

    def validate_token(self) -> bool:
        """Local expiry check only; the server remains the authority."""
        if not self.token:
            return False
        try:
            payload = jwt.decode(self.token, options={'verify_signature': False})
        except jwt.PyJWTError:
            return False
        exp = payload.get('exp')
        return isinstance(exp, (int, float)) and exp > time.time()

    def logout(self) -> None:
        self.token = None
        self.user = None
        self._notify()

    def on_auth_change(self, callback: AuthListener) -> None:
        self._listeners.append(callback)

    # ========== HTTP ==========

    async def request(
        self, method: str, path: str, *, authorized: bool = True, **kwargs: Any
    ) -> httpx.Response:
        headers = dict(kwargs.pop('headers', None) or {})
        if authorized and self.token:
            headers[settings.AUTH_HEADER_NAME] = self.token

        attempt = 0
        while True:
            try:
                response = await self._client.request(method, path, headers=headers, **kwargs)
                break
            except httpx.TransportError as e:
                attempt += 1
                if attempt > self.max_retries:
                    raise
                Logger.base.warning(
                    f'🔄 [AUTH_CLIENT] {method} {path} failed ({e}), retry {attempt}'
                )
                await anyio.sleep(self.retry_delay * attempt)

        if response.status_code == httpx.codes.UNAUTHORIZED and self.token:
            Logger.base.info('🔐 [AUTH_CLIENT] Token rejected, logging out')
            self.logout()
        response.raise_for_status()
        return response

    def _store_login(self, body: dict[str, Any]) -> dict[str, Any]:
        self.token = body['token']
        self.user = body['user']
        self._notify()
        return body

    def _notify(self) -> None:
        for callback in list(self._listeners):
            try:
                callback(self.user)
            except Exception as e:
                Logger.base.exception(f'❌ [AUTH_CLIENT] Auth listener failed: {e}')
