"""
End-to-end tests of the /ws/seats channel through the ASGI test client

REST calls and socket frames share one app instance, so locks taken over
HTTP show up as seatStatusUpdate events on the socket.
"""

import msgpack
import pytest


SEAT = {'concert_id': 1, 'section_name': 'VIP', 'seat_number': 'A1'}


def _authenticate(websocket, session, concert_id=1):
    websocket.send_json(
        {
            'action': 'authenticate',
            'data': {
                'token': session['token'],
                'wallet_address': session['user']['wallet_address'],
                'concert_id': concert_id,
            },
        }
    )
    return websocket.receive_json()


@pytest.mark.api
class TestSeatChannel:
    def test_select_seat_and_release_on_disconnect(self, client, wallet_login):
        # Given
        user = wallet_login(seed=1)
        other = wallet_login(seed=2)
        url = '/api/tickets/check-seat-availability'

        with client.websocket_connect('/ws/seats') as websocket:
            authenticated = _authenticate(websocket, user)
            assert authenticated['event'] == 'authenticated'
            assert authenticated['data']['can_lock'] is True

            # When
            websocket.send_json({'action': 'selectSeat', 'data': SEAT})

            # Then the room sees the lock, then the sender gets the confirmation
            update = websocket.receive_json()
            assert update['event'] == 'seatStatusUpdate'
            assert update['data']['action'] == 'locked'
            locked = websocket.receive_json()
            assert locked['event'] == 'seatLocked'
            assert locked['data']['seat_key'] == '1-VIP-A1'

            assert client.post(url, json=SEAT, headers=other['headers']).json()['available'] is (
                False
            )

        # Closing the socket gives the seat back
        assert client.post(url, json=SEAT, headers=other['headers']).json()['available'] is True

    def test_observer_sees_http_reservations(self, client, wallet_login):
        holder = wallet_login()

        with client.websocket_connect('/ws/seats') as websocket:
            websocket.send_json(
                {'action': 'authenticate', 'data': {'wallet_address': 'viewer', 'concert_id': 1}}
            )
            assert websocket.receive_json()['data']['can_lock'] is False

            client.post('/api/tickets/reserve-seat', json=SEAT, headers=holder['headers'])

            update = websocket.receive_json()
            assert update['event'] == 'seatStatusUpdate'
            assert update['data']['seat_key'] == '1-VIP-A1'
            assert update['data']['lock_type'] == 'temporary'

            websocket.send_json({'action': 'selectSeat', 'data': SEAT})
            assert websocket.receive_json() == {
                'event': 'error',
                'data': {'message': 'Not authenticated'},
            }

    def test_binary_frames_get_binary_replies(self, client):
        with client.websocket_connect('/ws/seats') as websocket:
            websocket.send_bytes(
                msgpack.packb({'action': 'ping', 'data': {'timestamp': 1}}, use_bin_type=True)
            )

            pong = msgpack.unpackb(websocket.receive_bytes(), raw=False)

        assert pong['event'] == 'pong'
        assert pong['data']['timestamp'] == 1

    def test_connection_counts_in_system_status(self, client, wallet_login):
        user = wallet_login()

        with client.websocket_connect('/ws/seats') as websocket:
            _authenticate(websocket, user)

            status = client.get('/api/system/status').json()['websocket']

        assert status == {'connected_users': 1, 'concert_rooms': 1, 'total_room_users': 1}
        assert client.get('/api/system/status').json()['websocket']['connected_users'] == 0

    def test_invalid_frames(self, client):
        with client.websocket_connect('/ws/seats') as websocket:
            websocket.send_text('{not json')
            error = websocket.receive_json()
            websocket.send_json({'action': 'fly'})
            unknown = websocket.receive_json()

        assert error['event'] == 'error'
        assert error['data']['message'].startswith('Invalid message format')
        assert unknown['data']['message'] == 'Unknown action: fly'
