"""Tests for the nisab endpoint."""


class TestNisabEndpoint:
    """Tests for GET /api/v1/nisab."""

    def test_default_currency_and_basis(self, client):
        """Defaults come from app config."""
        response = client.get('/api/v1/nisab')
        assert response.status_code == 200
        data = response.get_json()

        assert data['currency'] == 'GHS'
        assert data['basis'] == 'reference'
        assert data['threshold'] == 12450.0
        assert data['zakat_rate'] == 0.025

    def test_silver_basis(self, client):
        """Silver basis is 595 g at the silver price."""
        response = client.get('/api/v1/nisab?currency=NGN&basis=silver')
        data = response.get_json()

        assert data['currency'] == 'NGN'
        assert data['basis'] == 'silver'
        assert data['threshold'] == 595 * 650.0
        assert data['metals']['silver']['price_per_gram'] == 650.0
        assert data['metals']['silver']['source'] == 'reference'

    def test_invalid_currency(self, client):
        """Unknown currency returns 400."""
        response = client.get('/api/v1/nisab?currency=XYZ')
        assert response.status_code == 400
        assert response.get_json()['code'] == 'UnsupportedCurrency'

    def test_invalid_basis(self, client):
        """Unknown basis returns 400."""
        response = client.get('/api/v1/nisab?basis=copper')
        assert response.status_code == 400
        assert response.get_json()['code'] == 'InvalidNisabBasis'
