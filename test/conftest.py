"""
Test Configuration and Fixtures

- Unit tests (marked ``unit``) build use cases and services with mocks only
- API tests (marked ``api``) run the real app against a throwaway SQLite file
  with the in-memory seat lock store
"""

# =============================================================================
# Environment setup MUST happen before any src import (settings read it once)
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    os.environ.setdefault('DEBUG', 'false')
    os.environ.setdefault('SECRET_KEY', 'test_secret_key')
    os.environ.setdefault('SEAT_LOCK_BACKEND', 'memory')
    os.environ.setdefault('ALLOW_TEST_LOGIN', 'true')
    os.environ.setdefault('REQUIRE_LOGIN_NONCE', 'true')
    os.environ.setdefault('ADMIN_WALLET_ADDRESSES', '')


_early_setup_test_environment()

from collections.abc import Callable, Generator  # noqa: E402
from typing import Any  # noqa: E402

import base58  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from nacl.signing import SigningKey  # noqa: E402
import pytest  # noqa: E402

from src.platform.config.core_setting import settings  # noqa: E402
from src.platform.config.di import container  # noqa: E402


@pytest.fixture
def client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[TestClient, None, None]:
    """Fresh app state per test: new SQLite file, new DI singletons."""
    monkeypatch.setattr(settings, 'DATABASE_URL', f'sqlite+aiosqlite:///{tmp_path / "test.db"}')
    monkeypatch.setattr(settings, 'ALLOW_TEST_LOGIN', True)
    container.reset_singletons()

    from src.main import app

    with TestClient(app) as test_client:
        yield test_client

    container.reset_singletons()


@pytest.fixture
def login(client: TestClient) -> Callable[..., dict[str, Any]]:
    """Log in through /api/auth/login-test and return {'token', 'user', 'headers'}."""

    def _login(wallet_address: str) -> dict[str, Any]:
        response = client.post('/api/auth/login-test', json={'wallet_address': wallet_address})
        assert response.status_code == 200, response.text
        body = response.json()
        return {
            'token': body['token'],
            'user': body['user'],
            'headers': {settings.AUTH_HEADER_NAME: body['token']},
        }

    return _login


@pytest.fixture
def wallet_login(client: TestClient) -> Callable[..., dict[str, Any]]:
    """Full nonce + ed25519 signature login; such users are not admins."""

    def _wallet_login(seed: int = 7) -> dict[str, Any]:
        signing_key = SigningKey(bytes([seed]) * 32)
        wallet_address = base58.b58encode(bytes(signing_key.verify_key)).decode()
        message = client.get('/api/auth/nonce').json()['message']
        signature = base58.b58encode(signing_key.sign(message.encode()).signature).decode()

        response = client.post(
            '/api/auth/login',
            json={'wallet_address': wallet_address, 'signature': signature, 'message': message},
        )
        assert response.status_code == 200, response.text
        body = response.json()
        return {
            'token': body['token'],
            'user': body['user'],
            'headers': {settings.AUTH_HEADER_NAME: body['token']},
        }

    return _wallet_login


@pytest.fixture
def create_concert(client: TestClient) -> Callable[..., dict[str, Any]]:
    def _create_concert(headers: dict[str, str], **overrides: Any) -> dict[str, Any]:
        payload = {
            'name': 'Summer Night Live',
            'venue': 'Jakarta International Stadium',
            'date': '2030-08-17T19:00:00Z',
            'description': 'Open-air concert',
            'sections': [
                {'name': 'VIP', 'price': 1.5, 'total_seats': 10},
                {'name': 'Regular', 'price': 0.5, 'total_seats': 50},
            ],
        } | overrides
        response = client.post('/api/concerts', json=payload, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _create_concert


@pytest.fixture
def approved_concert(
    client: TestClient, login: Callable[..., dict[str, Any]], create_concert
) -> dict[str, Any]:
    """A concert created and approved by the admin wallet 'admin-wallet'."""
    admin = login('admin-wallet')
    concert = create_concert(admin['headers'])
    response = client.put(
        f'/api/admin/concerts/{concert["id"]}/approve', json={}, headers=admin['headers']
    )
    assert response.status_code == 200, response.text
    return response.json()
