import base58
from nacl.signing import SigningKey
import pytest

from src.platform.config.core_setting import settings


@pytest.mark.api
class TestHealthAndMetrics:
    @pytest.mark.parametrize('path', ['/health', '/api/health'])
    def test_health(self, client, path):
        response = client.get(path)

        assert response.status_code == 200
        assert response.json()['status'] == 'ok'
        assert 'timestamp' in response.json()

    def test_metrics_expose_prometheus_text(self, client):
        response = client.get('/metrics')

        assert response.status_code == 200
        assert response.headers['content-type'].startswith('text/plain')
        assert 'seat_locks_active' in response.text


@pytest.mark.api
class TestWalletLogin:
    def test_nonce_message_embeds_nonce(self, client):
        body = client.get('/api/auth/nonce').json()

        assert body['message'].endswith(str(body['nonce']))

    def test_signed_login_registers_plain_user(self, client, wallet_login):
        user = wallet_login(seed=3)

        assert user['user']['is_admin'] is False
        me = client.get('/api/auth/me', headers=user['headers'])
        assert me.status_code == 200
        assert me.json()['wallet_address'] == user['user']['wallet_address']
        admin_check = client.get('/api/auth/admin-check', headers=user['headers'])
        assert admin_check.json()['is_admin'] is False

    def test_second_login_reuses_user(self, wallet_login):
        first = wallet_login(seed=3)
        second = wallet_login(seed=3)

        assert first['user']['id'] == second['user']['id']

    def test_nonce_cannot_be_replayed(self, client):
        message = client.get('/api/auth/nonce').json()['message']
        signing_key = SigningKey(b'\x05' * 32)
        payload = {
            'wallet_address': base58.b58encode(bytes(signing_key.verify_key)).decode(),
            'signature': base58.b58encode(signing_key.sign(message.encode()).signature).decode(),
            'message': message,
        }

        assert client.post('/api/auth/login', json=payload).status_code == 200
        replay = client.post('/api/auth/login', json=payload)
        assert replay.status_code == 401
        assert replay.json() == {'detail': 'Invalid or expired nonce'}

    def test_bad_signature(self, client, wallet_login):
        message = client.get('/api/auth/nonce').json()['message']
        other = wallet_login(seed=9)['user']['wallet_address']

        response = client.post(
            '/api/auth/login',
            json={'wallet_address': other, 'signature': '1111', 'message': message},
        )

        assert response.status_code == 401
        assert response.json() == {'detail': 'Invalid signature'}

    def test_missing_fields(self, client):
        response = client.post('/api/auth/login', json={'wallet_address': 'w'})

        assert response.status_code == 400


@pytest.mark.api
class TestTestLogin:
    def test_test_login_grants_admin(self, client, login):
        admin = login('admin-wallet')

        assert admin['user']['is_admin'] is True
        response = client.get('/api/auth/admin-check', headers=admin['headers'])
        assert response.json() == {
            'success': True,
            'is_admin': True,
            'wallet_address': 'admin-wallet',
        }

    def test_test_login_needs_wallet_or_email(self, client):
        response = client.post('/api/auth/login-test', json={})

        assert response.status_code == 400

    def test_test_login_can_be_disabled(self, client, monkeypatch):
        monkeypatch.setattr(settings, 'ALLOW_TEST_LOGIN', False)

        response = client.post('/api/auth/login-test', json={'wallet_address': 'w'})

        assert response.status_code == 403
        assert response.json() == {'detail': 'Test login is disabled'}


@pytest.mark.api
class TestTokenTransport:
    def test_missing_token(self, client):
        response = client.get('/api/auth/me')

        assert response.status_code == 401
        assert response.json() == {'detail': 'No token, authorization denied'}

    def test_bearer_header_is_accepted(self, client, login):
        token = login('bearer-wallet')['token']

        response = client.get('/api/auth/me', headers={'Authorization': f'Bearer {token}'})

        assert response.status_code == 200
        assert response.json()['wallet_address'] == 'bearer-wallet'

    def test_garbage_token(self, client):
        response = client.get('/api/auth/me', headers={settings.AUTH_HEADER_NAME: 'garbage'})

        assert response.status_code == 401

    def test_admin_routes_reject_plain_users(self, client, wallet_login):
        user = wallet_login()

        response = client.get('/api/admin/concerts/pending', headers=user['headers'])

        assert response.status_code == 403
        assert response.json() == {'detail': 'Admin access required'}
