"""
Tests for chart of accounts API endpoints.

These test the HTTP layer: status codes, response format and
error mapping. Business rules are tested in
tests/services/test_chart_service.py.
"""

from datetime import date


def account_body(code="1010", account_type="ASSET"):
    return {
        "code": code,
        "name_ar": "صندوق فرعي",
        "name_en": "Petty cash",
        "account_type": account_type,
    }


class TestListAccounts:

    def test_list_requires_a_role(self, client, chart):
        assert client.get("/accounting/accounts").status_code == 403

    def test_unknown_role_rejected(self, client, chart, headers):
        response = client.get("/accounting/accounts", headers=headers("SUPERUSER"))
        assert response.status_code == 403

    def test_auditor_can_list(self, client, chart, headers):
        response = client.get("/accounting/accounts", headers=headers("AUDITOR"))
        assert response.status_code == 200
        data = response.json()
        assert data[0]["code"] == "1000"
        assert data[0]["normal_balance"] == "DEBIT"


class TestCreateAccount:

    def test_create_returns_201(self, client, headers):
        response = client.post(
            "/accounting/accounts", json=account_body(), headers=headers("ADMIN")
        )
        assert response.status_code == 201
        data = response.json()
        assert data["code"] == "1010"
        assert data["is_active"] is True

    def test_duplicate_code_returns_400(self, client, headers):
        client.post("/accounting/accounts", json=account_body(), headers=headers("ADMIN"))
        response = client.post(
            "/accounting/accounts", json=account_body(), headers=headers("ADMIN")
        )
        assert response.status_code == 400
        assert "already exists" in response.json()["detail"]

    def test_accountant_gets_403(self, client, headers):
        response = client.post(
            "/accounting/accounts", json=account_body(), headers=headers("ACCOUNTANT")
        )
        assert response.status_code == 403

    def test_invalid_type_returns_422(self, client, headers):
        response = client.post(
            "/accounting/accounts",
            json=account_body(account_type="CONTRA"),
            headers=headers("ADMIN"),
        )
        assert response.status_code == 422


class TestDeactivateAndDelete:

    def test_deactivate(self, client, chart, headers):
        account_id = chart["5500"].id
        response = client.post(
            f"/accounting/accounts/{account_id}/deactivate", headers=headers("ADMIN")
        )
        assert response.status_code == 200
        assert response.json()["is_active"] is False

    def test_delete_unused_returns_204(self, client, chart, headers):
        account_id = chart["5500"].id
        response = client.delete(
            f"/accounting/accounts/{account_id}", headers=headers("ADMIN")
        )
        assert response.status_code == 204

    def test_delete_referenced_returns_400(self, client, chart, headers):
        client.post("/accounting/journal", json={
            "date": date(2025, 1, 5).isoformat(),
            "lines": [
                {"account_id": chart["1000"].id, "debit": "10"},
                {"account_id": chart["3000"].id, "credit": "10"},
            ],
        }, headers=headers("ACCOUNTANT"))

        response = client.delete(
            f"/accounting/accounts/{chart['3000'].id}", headers=headers("ADMIN")
        )
        assert response.status_code == 400

    def test_delete_unknown_returns_404(self, client, headers):
        response = client.delete("/accounting/accounts/9999", headers=headers("ADMIN"))
        assert response.status_code == 404
