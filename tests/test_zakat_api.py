"""Tests for saved calculation endpoints."""
import pytest


def _create(client, headers, **overrides):
    body = {
        'currency': 'GHS',
        'assets': {'cash': 10000, 'gold': 5000},
        'deductions': {'debts': 2000},
        'nisab': 5000,
        'label': 'Ramadan 1447',
    }
    body.update(overrides)
    return client.post('/api/v1/zakat', json=body, headers=headers)


class TestUserHeader:
    """Saved calculation endpoints need a user."""

    @pytest.mark.parametrize('method,path', [
        ('get', '/api/v1/zakat'),
        ('post', '/api/v1/zakat'),
        ('get', '/api/v1/zakat/summary'),
        ('get', '/api/v1/zakat/1'),
        ('patch', '/api/v1/zakat/1'),
        ('delete', '/api/v1/zakat/1'),
        ('patch', '/api/v1/zakat/1/mark-paid'),
    ])
    def test_missing_header_is_401(self, client, method, path):
        """Requests without X-User-Id are rejected."""
        response = getattr(client, method)(path, json={})
        assert response.status_code == 401

    def test_calculate_needs_no_user(self, client):
        """The one-off calculator is open."""
        response = client.post('/api/v1/calculate', json={'assets': {'cash': 1}})
        assert response.status_code == 200


class TestCreateAndRead:
    """Tests for POST /api/v1/zakat and GET endpoints."""

    def test_create_returns_201(self, client, user_headers):
        """Saved calculation is returned with its summary."""
        response = _create(client, user_headers)
        assert response.status_code == 201
        data = response.get_json()

        assert data['label'] == 'Ramadan 1447'
        assert data['zakat_due'] == 325.0
        assert data['is_paid'] is False

    def test_create_validation_error(self, client, user_headers):
        """Invalid figures are 400 with the error code."""
        response = _create(client, user_headers, assets={'cash': -500})
        assert response.status_code == 400
        assert response.get_json()['code'] == 'InvalidAmount'

    def test_get_one(self, client, user_headers):
        """A saved calculation can be fetched by id."""
        calc_id = _create(client, user_headers).get_json()['id']
        response = client.get(f'/api/v1/zakat/{calc_id}', headers=user_headers)
        assert response.status_code == 200
        assert response.get_json()['id'] == calc_id

    def test_get_other_users_is_404(self, client, user_headers):
        """Calculations are private to their user."""
        calc_id = _create(client, user_headers).get_json()['id']
        response = client.get(f'/api/v1/zakat/{calc_id}', headers={'X-User-Id': 'someone-else'})
        assert response.status_code == 404
        assert response.get_json()['error'] == 'Calculation not found.'

    def test_list(self, client, user_headers):
        """List is paginated."""
        for _ in range(3):
            _create(client, user_headers)

        response = client.get('/api/v1/zakat?page=1&limit=2', headers=user_headers)
        data = response.get_json()

        assert len(data['calculations']) == 2
        assert data['pagination'] == {'total': 3, 'page': 1, 'limit': 2, 'pages': 2}

    def test_list_bad_page(self, client, user_headers):
        """Non-integer page is 400."""
        response = client.get('/api/v1/zakat?page=abc', headers=user_headers)
        assert response.status_code == 400

    def test_list_huge_page(self, client, user_headers):
        """A page past SQLite's range is 400, not a server error."""
        response = client.get('/api/v1/zakat?page=100000000000000000000', headers=user_headers)
        assert response.status_code == 400
        assert response.get_json()['code'] == 'InvalidField'

    def test_create_malformed_json(self, client, user_headers):
        """A malformed body is 400 and nothing is saved."""
        response = client.post(
            '/api/v1/zakat',
            data='{not json',
            content_type='application/json',
            headers=user_headers,
        )
        assert response.status_code == 400

        listing = client.get('/api/v1/zakat', headers=user_headers).get_json()
        assert listing['pagination']['total'] == 0

    def test_create_records_metal_prices(self, client, user_headers):
        """Saved calculations report the per-gram prices used."""
        data = _create(client, user_headers).get_json()
        assert data['gold_price_used'] == 420.5
        assert data['silver_price_used'] == 5.2


class TestUpdateDelete:
    """Tests for PATCH, DELETE and mark-paid."""

    def test_patch_recomputes(self, client, user_headers):
        """Changing assets updates the summary."""
        calc_id = _create(client, user_headers).get_json()['id']
        response = client.patch(f'/api/v1/zakat/{calc_id}', json={'assets': {'cash': 20000}}, headers=user_headers)

        assert response.status_code == 200
        assert response.get_json()['zakat_due'] == 575.0

    def test_patch_missing(self, client, user_headers):
        """Patching a missing calculation is 404."""
        response = client.patch('/api/v1/zakat/999', json={'label': 'x'}, headers=user_headers)
        assert response.status_code == 404

    def test_delete(self, client, user_headers):
        """Deleted calculations are gone."""
        calc_id = _create(client, user_headers).get_json()['id']

        response = client.delete(f'/api/v1/zakat/{calc_id}', headers=user_headers)
        assert response.status_code == 200
        assert response.get_json() == {'message': 'Calculation deleted.'}

        assert client.get(f'/api/v1/zakat/{calc_id}', headers=user_headers).status_code == 404

    def test_mark_paid(self, client, user_headers, frozen_time):
        """Mark-paid sets the flag, time and note."""
        calc_id = _create(client, user_headers).get_json()['id']
        response = client.patch(
            f'/api/v1/zakat/{calc_id}/mark-paid',
            json={'paid_note': 'Paid in full'},
            headers=user_headers,
        )
        data = response.get_json()

        assert response.status_code == 200
        assert data['is_paid'] is True
        assert data['paid_note'] == 'Paid in full'
        assert data['paid_at'] == '2026-03-01T09:30:00+00:00'


class TestDashboardSummary:
    """Tests for GET /api/v1/zakat/summary."""

    def test_summary_totals(self, client, user_headers):
        """Totals reflect paid and outstanding zakat."""
        first = _create(client, user_headers).get_json()['id']
        _create(client, user_headers, assets={'cash': 20000}, deductions={})
        client.patch(f'/api/v1/zakat/{first}/mark-paid', json={}, headers=user_headers)

        response = client.get('/api/v1/zakat/summary', headers=user_headers)
        data = response.get_json()

        assert data['total_calculations'] == 2
        assert data['total_zakat_due'] == pytest.approx(825.0)
        assert data['total_zakat_paid'] == pytest.approx(325.0)
        assert data['outstanding_zakat'] == pytest.approx(500.0)
