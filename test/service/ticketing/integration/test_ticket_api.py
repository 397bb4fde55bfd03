"""
API tests for minting and the secondary market

Every test starts from an approved concert (VIP: 10 seats at 1.5,
Regular: 50 seats at 0.5) created by the admin wallet.
"""

import pytest


@pytest.fixture
def mint(client, approved_concert):
    def _mint(headers, seat_number='A1', section_name='VIP', signature='sig-mint'):
        return client.post(
            '/api/tickets/mint',
            json={
                'concert_id': approved_concert['id'],
                'section_name': section_name,
                'seat_number': seat_number,
                'transaction_signature': signature,
                'mint_address': 'mint-address',
            },
            headers=headers,
        )

    return _mint


@pytest.mark.api
class TestMint:
    def test_mint_ticket(self, client, wallet_login, approved_concert, mint):
        buyer = wallet_login()

        response = mint(buyer['headers'])

        assert response.status_code == 201
        body = response.json()
        assert body['seat_key'] == f'{approved_concert["id"]}-VIP-A1'
        ticket = body['ticket']
        assert ticket['seat_code'] == 'VIP-A1'
        assert ticket['price'] == 1.5
        assert ticket['status'] == 'minted'
        assert ticket['display_status'] == 'valid'
        assert ticket['owner_wallet'] == buyer['user']['wallet_address']
        assert [entry['action'] for entry in ticket['transaction_history']] == ['mint']

    def test_minted_seat_updates_every_view(self, client, wallet_login, approved_concert, mint):
        # Given
        buyer = wallet_login()
        concert_id = approved_concert['id']

        # When
        mint(buyer['headers'])

        # Then
        availability = client.get(f'/api/concerts/{concert_id}/availability').json()
        assert availability['sections'][0]['available'] == 9
        assert availability['sections'][0]['percentage'] == 90

        minted = client.get(f'/api/tickets/concerts/{concert_id}/minted-seats').json()
        assert minted['seats'] == ['VIP-A1']

        url = f'/api/concerts/{concert_id}/sections/VIP/seat-map'
        assert client.get(url).json()['seats'][0]['status'] == 'minted'
        own_view = client.get(url, headers=buyer['headers']).json()
        assert own_view['seats'][0]['status'] == 'owned'

        mine = client.get('/api/tickets', headers=buyer['headers']).json()
        assert mine['count'] == 1
        assert mine['tickets'][0]['concert_name'] == 'Summer Night Live'

        # No lock is left behind once the mint completes
        locks = client.get(f'/api/system/locks/{concert_id}').json()
        assert locks['temporary_locks'] == [] and locks['processing_locks'] == []

    def test_seat_cannot_be_minted_twice(self, wallet_login, approved_concert, mint):
        mint(wallet_login(seed=1)['headers'])

        response = mint(wallet_login(seed=2)['headers'], seat_number='VIP-A1')

        assert response.status_code == 409
        assert response.json() == {
            'detail': 'This seat has already been purchased',
            'reason': 'already_minted',
            'seat_key': f'{approved_concert["id"]}-VIP-A1',
        }

    def test_seat_selected_by_someone_else(self, client, wallet_login, approved_concert, mint):
        holder = wallet_login(seed=1)
        seat = {'concert_id': approved_concert['id'], 'section_name': 'VIP', 'seat_number': 'A2'}
        client.post('/api/tickets/reserve-seat', json=seat, headers=holder['headers'])

        response = mint(wallet_login(seed=2)['headers'], seat_number='A2')

        assert response.status_code == 409
        assert response.json()['reason'] == 'seat_locked'

    def test_holder_of_temporary_lock_can_mint(self, client, wallet_login, approved_concert, mint):
        holder = wallet_login()
        seat = {'concert_id': approved_concert['id'], 'section_name': 'VIP', 'seat_number': 'A2'}
        client.post('/api/tickets/reserve-seat', json=seat, headers=holder['headers'])

        assert mint(holder['headers'], seat_number='A2').status_code == 201

    @pytest.mark.parametrize(
        'overrides,detail',
        [
            ({'seat_number': 'Z9'}, 'Invalid seat Z9 for section VIP'),
            ({'seat_number': 'A6'}, 'Invalid seat A6 for section VIP'),
            ({'signature': ''}, 'Transaction signature is required'),
        ],
        ids=['unknown_row', 'column_past_grid', 'no_signature'],
    )
    def test_rejected_mints(self, wallet_login, mint, overrides, detail):
        response = mint(wallet_login()['headers'], **overrides)

        assert response.status_code == 400
        assert response.json() == {'detail': detail}

    def test_unknown_section(self, wallet_login, mint):
        response = mint(wallet_login()['headers'], section_name='Pit')

        assert response.status_code == 404

    def test_pending_concert_is_not_mintable(self, client, wallet_login, create_concert):
        buyer = wallet_login()
        concert = create_concert(buyer['headers'])

        response = client.post(
            '/api/tickets/mint',
            json={
                'concert_id': concert['id'],
                'section_name': 'VIP',
                'seat_number': 'A1',
                'transaction_signature': 'sig',
            },
            headers=buyer['headers'],
        )

        assert response.status_code == 400
        assert response.json() == {'detail': 'Tickets can only be minted for approved concerts'}

    def test_mint_requires_login(self, client, approved_concert):
        response = client.post(
            '/api/tickets/mint',
            json={'concert_id': approved_concert['id'], 'section_name': 'VIP', 'seat_number': 'A1'},
        )

        assert response.status_code == 401


@pytest.mark.api
class TestMarketplace:
    def test_list_buy_and_history(self, client, wallet_login, mint):
        # Given a seller holding a minted ticket
        seller = wallet_login(seed=1)
        buyer = wallet_login(seed=2)
        ticket_id = mint(seller['headers']).json()['ticket']['id']

        # When the seller lists it
        listed = client.post(
            f'/api/tickets/{ticket_id}/list', json={'price': 2.0}, headers=seller['headers']
        )
        assert listed.status_code == 200
        assert listed.json()['ticket']['status'] == 'listed'
        assert listed.json()['ticket']['listing_price'] == 2.0

        market = client.get('/api/tickets/market').json()
        assert [t['id'] for t in market['tickets']] == [ticket_id]
        assert client.get('/api/tickets/marketplace/stats').json() == {
            'success': True,
            'total_tickets': 1,
            'listed_tickets': 1,
            'available_rate': 100.0,
        }

        # And the buyer purchases it
        own_purchase = client.post(
            f'/api/tickets/{ticket_id}/buy',
            json={'transaction_signature': 'sig-self'},
            headers=seller['headers'],
        )
        assert own_purchase.json() == {'detail': 'You already own this ticket'}
        bought = client.post(
            f'/api/tickets/{ticket_id}/buy',
            json={'transaction_signature': 'sig-buy'},
            headers=buyer['headers'],
        )

        # Then
        assert bought.status_code == 200
        ticket = bought.json()['ticket']
        assert ticket['owner_wallet'] == buyer['user']['wallet_address']
        assert ticket['is_listed'] is False
        assert client.get('/api/tickets/market').json()['count'] == 0

        history = client.get(f'/api/tickets/{ticket_id}/history', headers=buyer['headers'])
        assert [entry['action'] for entry in history.json()['history']] == [
            'mint',
            'list',
            'transfer',
        ]
        transfer = history.json()['history'][-1]
        assert transfer['from_wallet'] == seller['user']['wallet_address']
        assert transfer['price'] == 2.0

        # The previous owner lost access
        denied = client.get(f'/api/tickets/{ticket_id}', headers=seller['headers'])
        assert denied.status_code == 403

    def test_cancel_listing(self, client, wallet_login, mint):
        seller = wallet_login()
        ticket_id = mint(seller['headers']).json()['ticket']['id']
        url = f'/api/tickets/{ticket_id}/list'
        client.post(url, json={'price': 3}, headers=seller['headers'])

        response = client.delete(url, headers=seller['headers'])

        assert response.status_code == 200
        assert response.json()['ticket']['status'] == 'minted'
        assert client.delete(url, headers=seller['headers']).status_code == 400

    def test_only_owner_lists(self, client, wallet_login, mint):
        ticket_id = mint(wallet_login(seed=1)['headers']).json()['ticket']['id']

        response = client.post(
            f'/api/tickets/{ticket_id}/list',
            json={'price': 3},
            headers=wallet_login(seed=2)['headers'],
        )

        assert response.status_code == 403

    def test_unlisted_ticket_cannot_be_bought(self, client, wallet_login, mint):
        ticket_id = mint(wallet_login(seed=1)['headers']).json()['ticket']['id']

        response = client.post(
            f'/api/tickets/{ticket_id}/buy',
            json={'transaction_signature': 'sig'},
            headers=wallet_login(seed=2)['headers'],
        )

        assert response.status_code == 400
        assert response.json() == {'detail': 'Ticket is not for sale'}


@pytest.mark.api
class TestVerificationAndDeletion:
    def test_owner_marks_ticket_used(self, client, wallet_login, mint):
        owner = wallet_login(seed=1)
        ticket_id = mint(owner['headers']).json()['ticket']['id']

        stranger = client.put(
            f'/api/tickets/{ticket_id}/verify', headers=wallet_login(seed=2)['headers']
        )
        assert stranger.status_code == 403

        response = client.put(f'/api/tickets/{ticket_id}/verify', headers=owner['headers'])
        assert response.status_code == 200
        ticket = response.json()['ticket']
        assert ticket['is_used'] is True
        assert ticket['display_status'] == 'used'

        again = client.put(f'/api/tickets/{ticket_id}/verify', headers=owner['headers'])
        assert again.json() == {'detail': 'Ticket has already been used'}
        deleted = client.delete(f'/api/tickets/{ticket_id}', headers=owner['headers'])
        assert deleted.json() == {'detail': 'Used tickets cannot be deleted'}

    def test_concert_creator_can_verify(self, client, login, wallet_login, mint):
        ticket_id = mint(wallet_login()['headers']).json()['ticket']['id']

        response = client.put(
            f'/api/tickets/{ticket_id}/verify', headers=login('admin-wallet')['headers']
        )

        assert response.status_code == 200

    def test_blockchain_verification(self, client, wallet_login, mint):
        owner = wallet_login(seed=1)
        ticket_id = mint(owner['headers']).json()['ticket']['id']

        response = client.post(
            f'/api/tickets/{ticket_id}/verify-blockchain', headers=owner['headers']
        )

        assert response.status_code == 200
        verification = response.json()['verification']
        assert verification['is_valid'] is True
        assert verification['status'] == 'valid'
        assert verification['has_transaction_signature'] is True
        assert verification['concert_found'] is True
        assert verification['verified_by'] == owner['user']['wallet_address']
        assert response.json()['ticket']['transaction_history'][-1]['action'] == (
            'blockchain_verify'
        )

        other = client.post(
            f'/api/tickets/{ticket_id}/verify-blockchain', headers=wallet_login(seed=2)['headers']
        )
        assert other.status_code == 403

    def test_delete_frees_the_seat(self, client, wallet_login, approved_concert, mint):
        owner = wallet_login(seed=1)
        ticket_id = mint(owner['headers']).json()['ticket']['id']

        response = client.delete(f'/api/tickets/{ticket_id}', headers=owner['headers'])

        assert response.status_code == 200
        availability = client.get(f'/api/concerts/{approved_concert["id"]}/availability').json()
        assert availability['sections'][0]['available'] == 10
        assert client.get(f'/api/tickets/{ticket_id}', headers=owner['headers']).status_code == 404
        assert mint(wallet_login(seed=2)['headers']).status_code == 201

    def test_missing_ticket(self, client, wallet_login):
        response = client.get('/api/tickets/999', headers=wallet_login()['headers'])

        assert response.status_code == 404
        assert response.json() == {'detail': 'Ticket not found'}
