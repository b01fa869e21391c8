"""
Tests for journal API endpoints.
"""

from decimal import Decimal
import uuid


def receipt_body(chart, entry_date="2025-01-15", **extra):
    body = {
        "date": entry_date,
        "description_en": "Rent January",
        "lines": [
            {"account_id": chart["1000"].id, "debit": "105"},
            {"account_id": chart["4000"].id, "credit": "100"},
            {"account_id": chart["2200"].id, "credit": "5"},
        ],
    }
    body.update(extra)
    return body


def lock_january(client, headers):
    period = client.post("/accounting/periods", json={
        "start_date": "2025-01-01",
        "end_date": "2025-01-31",
        "code": "2025-01",
    }, headers=headers("ADMIN")).json()
    client.post(f"/accounting/periods/{period['id']}/lock", headers=headers("ADMIN"))
    return period


class TestCreateEntry:

    def test_balanced_entry_returns_201(self, client, chart, headers):
        response = client.post(
            "/accounting/journal", json=receipt_body(chart), headers=headers("ACCOUNTANT")
        )
        assert response.status_code == 201
        data = response.json()
        assert data["serial_number"] == "JRN-2025-0001"
        assert data["status"] == "APPROVED"
        assert Decimal(data["total_debit"]) == Decimal("105")
        assert len(data["lines"]) == 3

    def test_imbalanced_entry_returns_400(self, client, chart, headers):
        body = receipt_body(chart)
        body["lines"][2]["credit"] = "4"
        response = client.post("/accounting/journal", json=body, headers=headers("ACCOUNTANT"))

        assert response.status_code == 400
        assert "does not balance" in response.json()["detail"]
        assert client.get("/accounting/journal", headers=headers("AUDITOR")).json() == []

    def test_locked_period_returns_409(self, client, chart, headers):
        lock_january(client, headers)
        response = client.post(
            "/accounting/journal", json=receipt_body(chart), headers=headers("ACCOUNTANT")
        )
        assert response.status_code == 409
        assert "locked" in response.json()["detail"]

    def test_negative_amount_returns_422(self, client, chart, headers):
        body = receipt_body(chart)
        body["lines"][0]["debit"] = "-105"
        response = client.post("/accounting/journal", json=body, headers=headers("ACCOUNTANT"))
        assert response.status_code == 422

    def test_auditor_gets_403(self, client, chart, headers):
        response = client.post(
            "/accounting/journal", json=receipt_body(chart), headers=headers("AUDITOR")
        )
        assert response.status_code == 403


class TestEntryLifecycle:

    def _create(self, client, chart, headers, **extra):
        return client.post(
            "/accounting/journal",
            json=receipt_body(chart, **extra),
            headers=headers("ACCOUNTANT"),
        ).json()

    def test_cancel_then_cancel_again(self, client, chart, headers):
        entry = self._create(client, chart, headers)
        url = f"/accounting/journal/{entry['id']}/cancel"

        first = client.post(url, json={"reason": "Duplicate"}, headers=headers("APPROVER"))
        second = client.post(url, headers=headers("APPROVER"))

        assert first.status_code == 200
        assert first.json()["status"] == "CANCELLED"
        assert second.status_code == 400

    def test_accountant_cannot_cancel(self, client, chart, headers):
        entry = self._create(client, chart, headers)
        response = client.post(
            f"/accounting/journal/{entry['id']}/cancel", headers=headers("ACCOUNTANT")
        )
        assert response.status_code == 403

    def test_reverse_returns_new_entry(self, client, chart, headers):
        entry = self._create(client, chart, headers)
        response = client.post(
            f"/accounting/journal/{entry['id']}/reverse",
            json={"date": "2025-02-01"},
            headers=headers("APPROVER"),
        )

        assert response.status_code == 201
        reversal = response.json()
        assert reversal["id"] != entry["id"]
        assert reversal["date"] == "2025-02-01"
        assert Decimal(reversal["lines"][0]["credit"]) == Decimal("105")

        original = client.get(
            f"/accounting/journal/{entry['id']}", headers=headers("AUDITOR")
        ).json()
        assert original["replaced_by"] == reversal["id"]

    def test_approve_draft(self, client, chart, headers):
        entry = self._create(client, chart, headers, status="DRAFT")
        response = client.post(
            f"/accounting/journal/{entry['id']}/approve", headers=headers("APPROVER")
        )
        assert response.status_code == 200
        assert response.json()["status"] == "APPROVED"

    def test_unknown_entry_returns_404(self, client, chart, headers):
        response = client.post(
            f"/accounting/journal/{uuid.uuid4()}/cancel", headers=headers("APPROVER")
        )
        assert response.status_code == 404


class TestListEntries:

    def test_filters_by_date(self, client, chart, headers):
        for entry_date in ("2025-01-10", "2025-02-10", "2025-03-10"):
            client.post(
                "/accounting/journal",
                json=receipt_body(chart, entry_date=entry_date),
                headers=headers("ACCOUNTANT"),
            )

        response = client.get(
            "/accounting/journal",
            params={"from_date": "2025-02-01", "to_date": "2025-03-31"},
            headers=headers("AUDITOR"),
        )
        dates = [e["date"] for e in response.json()]
        assert dates == ["2025-03-10", "2025-02-10"]
