import os
from pathlib import Path
from typing import Annotated, List

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = Path(os.environ['ENV_FILE']) if os.environ.get('ENV_FILE') else _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Concert NFT Ticketing'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # Database
    DATABASE_URL: str = 'sqlite+aiosqlite:///./concert_tickets.db'
    DATABASE_ECHO: bool = False

    # Security
    SECRET_KEY: SecretStr = SecretStr('test_secret_key_change_in_production')
    ALGORITHM: str = 'HS256'
    ACCESS_TOKEN_EXPIRE_HOURS: int = 24
    AUTH_HEADER_NAME: str = 'x-auth-token'

    # Wallet login
    NONCE_TTL_SECONDS: int = 300
    REQUIRE_LOGIN_NONCE: bool = True
    ALLOW_TEST_LOGIN: bool = False
    ADMIN_WALLET_ADDRESSES: Annotated[List[str], NoDecode] = []

    # CORS
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = []  # add your frontend URL here

    @field_validator('BACKEND_CORS_ORIGINS', 'ADMIN_WALLET_ADDRESSES', mode='before')
    @classmethod
    def assemble_str_list(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and not v.startswith('['):
            return [i.strip() for i in v.split(',') if i.strip()]
        elif isinstance(v, list):
            return v
        return []

    # Seat locking
    SEAT_LOCK_BACKEND: str = 'memory'  # memory | kvrocks
    TEMPORARY_LOCK_SECONDS: int = 300
    PROCESSING_LOCK_SECONDS: int = 120
    LOCK_WARNING_SECONDS: int = 30
    LOCK_SWEEP_INTERVAL_SECONDS: float = 1.0

    @field_validator('SEAT_LOCK_BACKEND')
    @classmethod
    def validate_seat_lock_backend(cls, v: str) -> str:
        v = v.lower()
        if v not in ('memory', 'kvrocks'):
            raise ValueError(f'Unsupported SEAT_LOCK_BACKEND: {v}')
        return v

    # WebSocket
    WS_PING_INTERVAL_SECONDS: float = 30.0

    # Kvrocks Configuration (Redis protocol + Kvrocks storage)
    KVROCKS_HOST: str = 'localhost'
    KVROCKS_PORT: int = 6666
    KVROCKS_DB: int = 0
    KVROCKS_PASSWORD: str = ''
    KVROCKS_KEY_PREFIX: str = ''
    REDIS_DECODE_RESPONSES: bool = True

    # Kvrocks Connection Pool Configuration
    KVROCKS_POOL_MAX_CONNECTIONS: int = 50
    KVROCKS_POOL_SOCKET_TIMEOUT: int = 10  # seconds
    KVROCKS_POOL_SOCKET_CONNECT_TIMEOUT: int = 10  # seconds
    KVROCKS_POOL_SOCKET_KEEPALIVE: bool = True
    KVROCKS_POOL_HEALTH_CHECK_INTERVAL: int = 30  # seconds

    @property
    def KVROCKS_URL(self) -> str:
        return f'redis://{self.KVROCKS_HOST}:{self.KVROCKS_PORT}/{self.KVROCKS_DB}'


settings = Settings()  # type: ignore
