"""
Tests for the fiscal period API endpoints.
"""


class TestPeriods:

    def test_create_and_list(self, client, headers):
        response = client.post("/accounting/periods", json={
            "start_date": "2025-01-01", "end_date": "2025-12-31",
        }, headers=headers("ADMIN"))
        assert response.status_code == 201
        assert response.json()["code"] == "FY-2025"

        periods = client.get("/accounting/periods").json()
        assert [p["code"] for p in periods] == ["FY-2025"]

    def test_overlapping_period_returns_400(self, client, headers):
        client.post("/accounting/periods", json={
            "start_date": "2025-01-01", "end_date": "2025-12-31",
        }, headers=headers("ADMIN"))

        response = client.post("/accounting/periods", json={
            "start_date": "2025-06-01", "end_date": "2026-05-31",
        }, headers=headers("ADMIN"))
        assert response.status_code == 400

    def test_lock_records_user(self, client, headers):
        period = client.post("/accounting/periods", json={
            "start_date": "2025-01-01", "end_date": "2025-12-31",
        }, headers=headers("ADMIN")).json()

        response = client.post(
            f"/accounting/periods/{period['id']}/lock",
            headers=headers("ADMIN", user_id="controller-9"),
        )
        assert response.status_code == 200
        assert response.json()["is_locked"] is True
        assert response.json()["locked_by"] == "controller-9"

    def test_approver_cannot_lock(self, client, headers):
        period = client.post("/accounting/periods", json={
            "start_date": "2025-01-01", "end_date": "2025-12-31",
        }, headers=headers("ADMIN")).json()

        response = client.post(
            f"/accounting/periods/{period['id']}/lock", headers=headers("APPROVER")
        )
        assert response.status_code == 403

    def test_lock_unknown_returns_404(self, client, headers):
        response = client.post("/accounting/periods/42/lock", headers=headers("ADMIN"))
        assert response.status_code == 404

    def test_inverted_dates_return_422(self, client, headers):
        response = client.post("/accounting/periods", json={
            "start_date": "2025-12-31", "end_date": "2025-01-01",
        }, headers=headers("ADMIN"))
        assert response.status_code == 422
