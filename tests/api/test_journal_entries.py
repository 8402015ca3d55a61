"""
Tests for the journal entry API endpoints.

These check the HTTP layer: status codes, response format,
error codes and the X-User audit header. Business rules are
tested in tests/services/test_journal_service.py.
"""

from decimal import Decimal

from accounting_ledger.services.entry_numbers import EntryNumberService


def entry_payload(*lines, description="Owner investment"):
    return {
        "transaction_date": "2026-10-15",
        "description": description,
        "reference": "INV-42",
        "lines": list(lines),
    }


def debit(account, amount):
    return {"account_id": account.id, "debit_amount": amount}


def credit(account, amount):
    return {"account_id": account.id, "credit_amount": amount}


def create_entry(client, chart, amount="1000.00"):
    response = client.post("/journal-entries", json=entry_payload(
        debit(chart["CASH"], amount),
        credit(chart["CAPITAL"], amount),
    ))
    assert response.status_code == 201
    return response.json()


class TestCreateJournalEntry:

    def test_create_returns_201_with_lines(self, client, chart):
        data = create_entry(client, chart)

        assert data["entry_number"].startswith("JE")
        assert data["is_posted"] is False
        assert Decimal(data["total_amount"]) == Decimal("2000")
        assert [line["entry_type"] for line in data["lines"]] == ["DEBIT", "CREDIT"]
        assert data["lines"][0]["account_code"] == "CASH"
        assert Decimal(data["lines"][1]["credit_amount"]) == Decimal("1000")

    def test_actor_taken_from_header(self, client, chart):
        response = client.post(
            "/journal-entries",
            json=entry_payload(debit(chart["CASH"], "10"), credit(chart["SALES"], "10")),
            headers={"X-User": "bob@example.com"},
        )

        assert response.json()["created_by"] == "bob@example.com"

    def test_missing_header_falls_back_to_default_actor(self, client, chart):
        data = create_entry(client, chart)
        assert data["created_by"] == "system"

    def test_unbalanced_returns_400(self, client, chart):
        response = client.post("/journal-entries", json=entry_payload(
            debit(chart["CASH"], "1000"),
            credit(chart["SALES"], "500"),
        ))

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["code"] == "UNBALANCED_ENTRY"
        assert "Debits: $1,000.00" in detail["message"]

    def test_unknown_accounts_return_400(self, client, chart):
        response = client.post("/journal-entries", json=entry_payload(
            {"account_id": 999, "debit_amount": "50"},
            credit(chart["SALES"], "50"),
        ))

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "UNKNOWN_OR_DELETED_ACCOUNTS"

    def test_line_with_both_sides_returns_400(self, client, chart):
        response = client.post("/journal-entries", json=entry_payload(
            {"account_id": chart["CASH"].id, "debit_amount": "50", "credit_amount": "50"},
            credit(chart["SALES"], "50"),
            debit(chart["RENT"], "50"),
        ))

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "INVALID_LINE_SHAPE"

    def test_single_line_is_a_validation_error(self, client, chart):
        response = client.post("/journal-entries", json=entry_payload(
            debit(chart["CASH"], "50"),
        ))
        assert response.status_code == 422

    def test_rejected_entry_is_not_listed(self, client, chart):
        client.post("/journal-entries", json=entry_payload(
            debit(chart["CASH"], "1000"),
            credit(chart["SALES"], "1"),
        ))

        assert client.get("/journal-entries").json() == []


class TestReadJournalEntries:

    def test_get_entry(self, client, chart):
        created = create_entry(client, chart)

        response = client.get(f"/journal-entries/{created['id']}")

        assert response.status_code == 200
        assert response.json()["entry_number"] == created["entry_number"]

    def test_get_missing_entry_returns_404(self, client):
        response = client.get("/journal-entries/999")

        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "ENTRY_NOT_FOUND"

    def test_list_filters_by_posted(self, client, chart):
        draft = create_entry(client, chart)
        posted = create_entry(client, chart)
        client.post(f"/journal-entries/{posted['id']}/post")

        drafts = client.get("/journal-entries", params={"is_posted": False}).json()
        assert [e["id"] for e in drafts] == [draft["id"]]


class TestUpdateJournalEntry:

    def test_update_replaces_lines(self, client, chart):
        created = create_entry(client, chart)

        response = client.put(
            f"/journal-entries/{created['id']}",
            json=entry_payload(
                debit(chart["RENT"], "250"),
                credit(chart["CASH"], "250"),
                description="Rent paid",
            ),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["description"] == "Rent paid"
        assert len(data["lines"]) == 2
        assert data["lines"][0]["account_code"] == "RENT"
        assert Decimal(data["total_amount"]) == Decimal("500")

    def test_update_posted_entry_returns_409(self, client, chart):
        created = create_entry(client, chart)
        client.post(f"/journal-entries/{created['id']}/post")

        response = client.put(
            f"/journal-entries/{created['id']}",
            json=entry_payload(debit(chart["CASH"], "1"), credit(chart["SALES"], "1")),
        )

        assert response.status_code == 409
        assert response.json()["detail"]["code"] == "ENTRY_POSTED"


class TestPostJournalEntry:

    def test_post_returns_posted_entry(self, client, chart):
        created = create_entry(client, chart)

        response = client.post(
            f"/journal-entries/{created['id']}/post",
            headers={"X-User": "controller@example.com"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["is_posted"] is True
        assert data["posted_by"] == "controller@example.com"

    def test_post_updates_account_balances(self, client, chart):
        created = create_entry(client, chart, amount="750.00")
        client.post(f"/journal-entries/{created['id']}/post")

        cash = client.get(f"/accounts/{chart['CASH'].id}").json()
        capital = client.get(f"/accounts/{chart['CAPITAL'].id}").json()
        assert Decimal(cash["balance"]) == Decimal("750")
        assert Decimal(capital["balance"]) == Decimal("750")

    def test_post_twice_returns_409(self, client, chart):
        created = create_entry(client, chart)
        client.post(f"/journal-entries/{created['id']}/post")

        response = client.post(f"/journal-entries/{created['id']}/post")

        assert response.status_code == 409
        assert response.json()["detail"]["code"] == "ALREADY_POSTED"


class TestDeleteJournalEntry:

    def test_delete_returns_204_and_hides_entry(self, client, chart):
        created = create_entry(client, chart)

        response = client.delete(f"/journal-entries/{created['id']}")

        assert response.status_code == 204
        assert client.get(f"/journal-entries/{created['id']}").status_code == 404

    def test_delete_posted_entry_returns_409(self, client, chart):
        created = create_entry(client, chart)
        client.post(f"/journal-entries/{created['id']}/post")

        response = client.delete(f"/journal-entries/{created['id']}")

        assert response.status_code == 409
        assert "immutable for audit purposes" in response.json()["detail"]["message"]


class TestDeleteJournalEntryLine:

    def test_delete_line_returns_204(self, client, chart):
        response = client.post("/journal-entries", json=entry_payload(
            debit(chart["CASH"], "300"),
            credit(chart["SALES"], "300"),
            debit(chart["RENT"], "0.01"),
        ))
        entry = response.json()
        rent_line = entry["lines"][2]

        response = client.delete(
            f"/journal-entries/lines/{rent_line['id']}",
            headers={"X-User": "bob@example.com"},
        )
        assert response.status_code == 204

        remaining = client.get(f"/journal-entries/{entry['id']}").json()
        assert [line["account_code"] for line in remaining["lines"]] == ["CASH", "SALES"]
        assert Decimal(remaining["total_amount"]) == Decimal("600")
        assert remaining["updated_by"] == "bob@example.com"

    def test_unbalancing_delete_reports_code(self, client, chart):
        entry = create_entry(client, chart)

        response = client.delete(f"/journal-entries/lines/{entry['lines'][0]['id']}")

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "WOULD_UNBALANCE"

    def test_missing_line_returns_404(self, client):
        response = client.delete("/journal-entries/lines/999")

        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "LINE_NOT_FOUND"


class TestConcurrentCreate:

    def test_entry_number_clash_returns_409(self, client, chart, monkeypatch):
        taken = create_entry(client, chart)["entry_number"]
        monkeypatch.setattr(EntryNumberService, "next_number", lambda self, now: taken)

        response = client.post("/journal-entries", json=entry_payload(
            debit(chart["CASH"], "5"), credit(chart["SALES"], "5"),
        ))

        assert response.status_code == 409
        assert response.json()["detail"]["code"] == "CONCURRENCY_CONFLICT"
        assert len(client.get("/journal-entries").json()) == 1
