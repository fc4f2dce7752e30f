"""HTTP surface exercised through the Flask test client."""

from __future__ import annotations

from decimal import Decimal

import pytest

from sitebooks import create_app
from sitebooks.extensions import EXTENSION_KEY
from sitebooks.models import BankAccount, Category, Site, Vendor

ADMIN = {"X-User-Id": "admin-1", "X-User-Role": "admin"}
MANAGER = {"X-User-Id": "manager-1", "X-User-Role": "site_manager"}
VIEWER = {"X-User-Id": "viewer-1", "X-User-Role": "viewer"}


@pytest.fixture()
def app(tmp_path, monkeypatch: pytest.MonkeyPatch):
    db_path = tmp_path / "sitebooks.db"
    monkeypatch.setenv("SITEBOOKS_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("SITEBOOKS_DATABASE_URL", f"sqlite:///{db_path}")
    app = create_app("testing")
    app.config.update(TESTING=True)
    return app


@pytest.fixture()
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture()
def seeded(app):
    """Reference rows plus two bank accounts; returns their ids."""

    context = app.extensions[EXTENSION_KEY]
    with context.session_factory() as session:
        site = Site(site_name="Tower A")
        vendor = Vendor(name="Acme Cement")
        category = Category(category_name="Materials")
        session.add_all([site, vendor, category])
        session.flush()
        ids = {"site": site.id, "vendor": vendor.id, "category": category.id}

    ids["a"] = context.account_repo.create(
        BankAccount(account_name="A", opening_balance=Decimal("1000"))
    ).id
    ids["b"] = context.account_repo.create(
        BankAccount(account_name="B", opening_balance=Decimal("0"))
    ).id
    return ids


def _expense_body(seeded, **overrides):
    body = {
        "site_id": seeded["site"],
        "vendor_id": seeded["vendor"],
        "category_id": seeded["category"],
        "date": "2024-05-10",
        "amount": "200",
        "description": "Cement",
        "payment_status": "paid",
        "payment_method": "bank_transfer",
        "bank_account_id": seeded["a"],
    }
    body.update(overrides)
    return body


def _balance(client, account_id):
    response = client.get(f"/bank-accounts/{account_id}")
    assert response.status_code == 200
    return response.get_json()["balance"]


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}


def test_expense_lifecycle(client, seeded):
    response = client.post("/expenses", json=_expense_body(seeded), headers=MANAGER)
    assert response.status_code == 201
    payload = response.get_json()
    assert payload["amount"] == "200.00"
    assert payload["site_name"] == "Tower A"
    assert payload["bank_account_name"] == "A"
    assert _balance(client, seeded["a"]) == "800.00"

    expense_id = payload["id"]
    response = client.put(
        f"/expenses/{expense_id}",
        json=_expense_body(seeded, amount="250.50"),
        headers=MANAGER,
    )
    assert response.status_code == 200
    assert _balance(client, seeded["a"]) == "749.50"

    assert client.get(f"/expenses/{expense_id}").get_json()["amount"] == "250.50"
    assert len(client.get("/expenses?site_id=all").get_json()) == 1

    response = client.delete(f"/expenses/{expense_id}", headers=MANAGER)
    assert response.status_code == 403
    response = client.delete(f"/expenses/{expense_id}", headers=ADMIN)
    assert response.status_code == 200
    assert _balance(client, seeded["a"]) == "1000.00"
    assert client.get(f"/expenses/{expense_id}").status_code == 404


def test_expense_validation_errors(client, seeded):
    response = client.post(
        "/expenses",
        json=_expense_body(seeded, amount="-1", bank_account_id="", date="yesterday"),
        headers=MANAGER,
    )
    assert response.status_code == 422
    body = response.get_json()
    assert body["code"] == "INVALID_INPUT"
    assert set(body["fields"]) == {"amount", "bank_account_id", "date"}


def test_missing_identity_is_unauthorized(client, seeded):
    response = client.post("/expenses", json=_expense_body(seeded))
    assert response.status_code == 401
    assert response.get_json()["code"] == "UNAUTHORIZED"


def test_viewer_is_forbidden(client, seeded):
    response = client.post("/expenses", json=_expense_body(seeded), headers=VIEWER)
    assert response.status_code == 403


def test_unknown_account_returns_404_and_persists_nothing(client, seeded):
    response = client.post(
        "/expenses", json=_expense_body(seeded, bank_account_id="ghost"), headers=MANAGER
    )
    assert response.status_code == 404
    assert response.get_json()["code"] == "ACCOUNT_NOT_FOUND"
    assert client.get("/expenses").get_json() == []


def test_unknown_site_is_invalid_reference(client, seeded):
    response = client.post(
        "/expenses", json=_expense_body(seeded, site_id="ghost"), headers=MANAGER
    )
    assert response.status_code == 422
    assert response.get_json()["code"] == "INVALID_REFERENCE"


def test_credit_routes(client, seeded):
    response = client.post(
        "/credits",
        json={
            "date": "2024-05-11",
            "amount": 500,
            "payment_method": "bank_transfer",
            "bank_account_id": seeded["a"],
            "site_id": seeded["site"],
            "category": "Tower A",
        },
        headers=MANAGER,
    )
    assert response.status_code == 201
    credit = response.get_json()
    assert credit["site_name"] == "Tower A"
    assert _balance(client, seeded["a"]) == "1500.00"

    listed = client.get(f"/credits?bank_account_id={seeded['a']}").get_json()
    assert [item["id"] for item in listed] == [credit["id"]]

    assert client.delete(f"/credits/{credit['id']}", headers=ADMIN).status_code == 200
    assert _balance(client, seeded["a"]) == "1000.00"


def test_fund_transfer_routes(client, seeded):
    response = client.post(
        "/fund-transfers",
        json={
            "from_account_id": seeded["a"],
            "to_account_id": seeded["b"],
            "amount": "300",
            "date": "2024-05-12",
        },
        headers=MANAGER,
    )
    assert response.status_code == 201
    transfer = response.get_json()
    assert transfer["from_account_name"] == "A"
    assert _balance(client, seeded["a"]) == "700.00"
    assert _balance(client, seeded["b"]) == "300.00"

    listed = client.get(f"/fund-transfers?bank_account_id={seeded['b']}").get_json()
    assert listed[0]["direction"] == "in"

    assert client.delete(f"/fund-transfers/{transfer['id']}", headers=ADMIN).status_code == 200
    assert _balance(client, seeded["a"]) == "1000.00"
    assert _balance(client, seeded["b"]) == "0.00"


def test_self_transfer_rejected(client, seeded):
    response = client.post(
        "/fund-transfers",
        json={
            "from_account_id": seeded["a"],
            "to_account_id": seeded["a"],
            "amount": "10",
            "date": "2024-05-12",
        },
        headers=MANAGER,
    )
    assert response.status_code == 422
    assert "to_account_id" in response.get_json()["fields"]
    assert _balance(client, seeded["a"]) == "1000.00"


def test_report_summary(client, seeded):
    client.post("/expenses", json=_expense_body(seeded), headers=MANAGER)
    client.post(
        "/fund-transfers",
        json={
            "from_account_id": seeded["b"],
            "to_account_id": seeded["a"],
            "amount": "50",
            "date": "2024-05-13",
        },
        headers=MANAGER,
    )

    response = client.get(
        f"/reports/summary?bank_account_id={seeded['a']}&site_id=all&start_date=2024-05-01"
    )
    assert response.status_code == 200
    report = response.get_json()
    assert report["totals"] == {
        "total_expenses": "200.00",
        "total_credits": "50.00",
        "net": "-150.00",
    }
    assert [row["kind"] for row in report["rows"]] == ["transfer", "expense"]
    assert report["rows"][0]["direction"] == "in"
    assert report["account_summary"][-1]["account_name"] == "Cash"


def test_report_rejects_bad_status(client):
    response = client.get("/reports/summary?payment_status=overdue")
    assert response.status_code == 422


def test_dashboard(client, seeded):
    client.post("/expenses", json=_expense_body(seeded, date="2024-05-10"), headers=MANAGER)
    response = client.get("/reports/dashboard?today=2024-05-10")
    assert response.status_code == 200
    stats = response.get_json()
    assert stats["today_total"] == "200.00"
    assert stats["sites_count"] == 1
    assert len(stats["monthly_trend"]) == 6


def test_reconciliation_endpoint(client, seeded):
    client.post("/expenses", json=_expense_body(seeded), headers=MANAGER)
    response = client.get("/bank-accounts/reconciliation")
    assert response.status_code == 200
    body = response.get_json()
    assert body["consistent"] is True
    assert {item["account_name"] for item in body["accounts"]} == {"A", "B"}


def test_unknown_route_is_json(client):
    response = client.get("/nope")
    assert response.status_code == 404
    assert response.get_json()["code"] == "NOT_FOUND"


def test_reconcile_cli(app, seeded):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["sitebooks-reconcile"])
    assert result.exit_code == 0
    assert "All balances reconcile." in result.output

    result = runner.invoke(args=["sitebooks-init-db"])
    assert result.exit_code == 0
    assert "Database ready" in result.output


@pytest.mark.parametrize("amount", ["1e30", "123456789012345678901234567", "1000000000000"])
def test_oversized_amount_is_validation_error(client, seeded, amount):
    response = client.post(
        "/expenses", json=_expense_body(seeded, amount=amount), headers=MANAGER
    )
    assert response.status_code == 422
    assert "amount" in response.get_json()["fields"]
    assert _balance(client, seeded["a"]) == "1000.00"


def test_config_name_selects_config(app):
    assert app.config["TESTING"] is True
    assert type(app.config["SITEBOOKS_CONFIG"]).__name__ == "TestConfig"
