import pytest


@pytest.mark.api
class TestConcertSubmission:
    def test_creator_submits_pending_concert(self, client, wallet_login, create_concert):
        creator = wallet_login()

        concert = create_concert(creator['headers'])

        assert concert['status'] == 'pending'
        assert concert['creator_wallet'] == creator['user']['wallet_address']
        assert concert['total_seats'] == 60
        assert concert['available_seats'] == 60
        assert [s['available_seats'] for s in concert['sections']] == [10, 50]

        mine = client.get('/api/concerts/me/pending', headers=creator['headers']).json()
        assert [c['id'] for c in mine['concerts']] == [concert['id']]
        assert client.get('/api/concerts').json()['count'] == 0

    @pytest.mark.parametrize(
        'overrides,detail',
        [
            ({'name': ' '}, 'Concert name is required'),
            ({'sections': []}, 'At least one section is required'),
            ({'date': None}, 'Concert date is required'),
            (
                {'sections': [{'name': 'VIP', 'price': 1, 'total_seats': 0}]},
                'Section VIP must have at least one seat',
            ),
        ],
        ids=['blank_name', 'no_sections', 'no_date', 'empty_section'],
    )
    def test_invalid_concert_is_rejected(self, client, wallet_login, overrides, detail):
        creator = wallet_login()
        payload = {
            'name': 'Show',
            'venue': 'Hall',
            'date': '2030-01-01T20:00:00Z',
            'sections': [{'name': 'VIP', 'price': 1, 'total_seats': 5}],
        } | overrides

        response = client.post('/api/concerts', json=payload, headers=creator['headers'])

        assert response.status_code == 400
        assert response.json() == {'detail': detail}

    def test_unknown_concert(self, client):
        response = client.get('/api/concerts/999')

        assert response.status_code == 404
        assert response.json() == {'detail': 'Concert not found'}


@pytest.mark.api
class TestAdminReview:
    def test_approve_publishes_concert(self, client, login, wallet_login, create_concert):
        admin = login('admin-wallet')
        concert = create_concert(wallet_login()['headers'])

        pending = client.get('/api/admin/concerts/pending', headers=admin['headers']).json()
        assert [c['id'] for c in pending['concerts']] == [concert['id']]

        response = client.put(
            f'/api/admin/concerts/{concert["id"]}/approve',
            json={'feedback': 'Looks good'},
            headers=admin['headers'],
        )

        assert response.status_code == 200
        approved = response.json()
        assert approved['status'] == 'approved'
        assert approved['admin_feedback'][0]['message'] == 'Looks good'
        assert approved['admin_feedback'][0]['admin_wallet'] == 'admin-wallet'
        assert [c['id'] for c in client.get('/api/concerts').json()['concerts']] == [
            concert['id']
        ]

    def test_reject_needs_feedback(self, client, login, wallet_login, create_concert):
        admin = login('admin-wallet')
        concert = create_concert(wallet_login()['headers'])
        url = f'/api/admin/concerts/{concert["id"]}/reject'

        assert client.put(url, json={}, headers=admin['headers']).status_code == 400

        response = client.put(url, json={'feedback': 'Venue unknown'}, headers=admin['headers'])
        assert response.json()['status'] == 'rejected'
        rejected = client.get('/api/admin/concerts/rejected', headers=admin['headers']).json()
        assert rejected['count'] == 1

    def test_info_request_round_trip(self, client, login, wallet_login, create_concert):
        # Given
        admin = login('admin-wallet')
        creator = wallet_login(seed=1)
        stranger = wallet_login(seed=2)
        concert = create_concert(creator['headers'])

        # When admin asks for more info
        response = client.put(
            f'/api/admin/concerts/{concert["id"]}/request-info',
            json={'feedback': 'Need permits'},
            headers=admin['headers'],
        )
        assert response.json()['status'] == 'info_requested'

        # Then only the creator may answer
        url = f'/api/concerts/{concert["id"]}/additional-info'
        denied = client.put(url, json={'additional_info': 'x'}, headers=stranger['headers'])
        assert denied.status_code == 403

        answered = client.put(
            url, json={'additional_info': 'Permit #42'}, headers=creator['headers']
        )
        assert answered.status_code == 200
        assert answered.json()['status'] == 'pending'
        assert answered.json()['additional_info'][0]['message'] == 'Permit #42'

    def test_cannot_approve_twice(self, client, login, approved_concert):
        admin = login('admin-wallet')

        response = client.put(
            f'/api/admin/concerts/{approved_concert["id"]}/approve',
            json={},
            headers=admin['headers'],
        )

        assert response.status_code == 400
        assert response.json() == {
            'detail': 'Cannot change concert status from approved to approved'
        }


@pytest.mark.api
class TestSeatViews:
    def test_availability_of_fresh_concert(self, client, approved_concert):
        response = client.get(f'/api/concerts/{approved_concert["id"]}/availability')

        assert response.status_code == 200
        body = response.json()
        assert body['success'] is True
        assert body['total'] == 60
        assert body['available'] == 60
        assert body['sections'][0] == {
            'name': 'VIP',
            'price': 1.5,
            'total': 10,
            'available': 10,
            'percentage': 100,
        }

    def test_seat_map_layout(self, client, approved_concert):
        response = client.get(f'/api/concerts/{approved_concert["id"]}/sections/VIP/seat-map')

        assert response.status_code == 200
        body = response.json()
        assert (body['rows'], body['columns'], body['total']) == (2, 5, 10)
        assert body['price'] == 1.5
        assert body['seats'][0] == {
            'code': 'VIP-A1',
            'seat_number': 'A1',
            'row': 'A',
            'column': 1,
            'status': 'available',
        }
        assert body['seats'][-1]['code'] == 'VIP-B5'
        assert body['counts']['available'] == 10

    def test_seat_map_unknown_section(self, client, approved_concert):
        response = client.get(f'/api/concerts/{approved_concert["id"]}/sections/Pit/seat-map')

        assert response.status_code == 404
        assert response.json() == {'detail': 'Section not found: Pit'}
