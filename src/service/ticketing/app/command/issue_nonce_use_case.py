from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_nonce_store import INonceStore
from src.service.ticketing.domain.wallet_login import build_login_message


class IssueNonceUseCase:
    def __init__(self, nonce_store: INonceStore) -> None:
        self.nonce_store = nonce_store

    @classmethod
    @inject
    def depends(cls, nonce_store: INonceStore = Depends(Provide[Container.nonce_store])) -> Self:
        return cls(nonce_store=nonce_store)

    @Logger.io
    async def issue(self) -> dict:
        nonce = await self.nonce_store.issue(ttl_seconds=settings.NONCE_TTL_SECONDS)
        return {'nonce': nonce, 'message': build_login_message(nonce)}
