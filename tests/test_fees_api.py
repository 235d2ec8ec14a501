import datetime

from feeledger.services import ledger
from tests.conftest import OWNER


def test_generate_twice(client, auth_headers, make_student):
    student = make_student()
    url = f"/api/v1/fees/student/{student.id}/generate"

    first = client.post(url, json={"year": 2026}, headers=auth_headers).json()
    assert first["created"] == 12
    assert first["status"] == "success"

    second = client.post(url, json={"year": 2026}, headers=auth_headers).json()
    assert second == {
        "year": 2026,
        "created": 0,
        "status": "info",
        "message": "All fees for 2026 already exist",
    }


def test_generate_for_unknown_student(client, auth_headers):
    r = client.post("/api/v1/fees/student/999/generate", json={"year": 2026}, headers=auth_headers)
    assert r.status_code == 404


def test_student_fee_view(db, client, auth_headers, make_student):
    student = make_student(fee=700)
    ledger.create_fee(db, OWNER, student.id, 3, 2026, 700, status="paid")
    ledger.create_fee(db, OWNER, student.id, 1, 2026, 700)
    ledger.create_fee(db, OWNER, student.id, 1, 2025, 700)

    body = client.get(f"/api/v1/fees/student/{student.id}?year=2026", headers=auth_headers).json()
    assert [f["month"] for f in body["fees"]] == [1, 3]
    assert len(body["grid"]) == 12
    assert body["grid"][1] == {"month": 2, "month_name": "february", "fee": None}
    assert body["grid"][2]["fee"]["status"] == "paid"
    assert body["summary"] == {"paid_count": 1, "unpaid_count": 1, "total_paid": 700, "total_pending": 700}


def test_qr_payment_needs_transaction_id(db, client, auth_headers, make_student):
    student = make_student()
    fee = ledger.create_fee(db, OWNER, student.id, 1, 2026, 700)

    r = client.post(f"/api/v1/fees/{fee.id}/pay", json={"payment_method": "qr"}, headers=auth_headers)
    assert r.status_code == 400

    view = client.get(f"/api/v1/fees/student/{student.id}?year=2026", headers=auth_headers).json()
    assert view["fees"][0]["status"] == "unpaid"

    r = client.post(f"/api/v1/fees/{fee.id}/pay",
                    json={"payment_method": "qr", "transaction_id": "UPI42"}, headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["status"] == "paid"
    assert r.json()["transaction_id"] == "UPI42"


def test_cash_payment(db, client, auth_headers, make_student):
    fee = ledger.create_fee(db, OWNER, make_student().id, 1, 2026, 700)
    r = client.post(f"/api/v1/fees/{fee.id}/pay", json={"payment_method": "cash"}, headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["payment_method"] == "cash"
    assert r.json()["paid_at"] is not None


def test_pay_unknown_fee(client, auth_headers):
    r = client.post("/api/v1/fees/999/pay", json={"payment_method": "cash"}, headers=auth_headers)
    assert r.status_code == 404


def test_create_duplicate_fee(client, auth_headers, make_student):
    student = make_student()
    payload = {"student_id": student.id, "month": 6, "year": 2026, "amount": 700}
    assert client.post("/api/v1/fees", json=payload, headers=auth_headers).status_code == 201

    r = client.post("/api/v1/fees", json={**payload, "amount": 900}, headers=auth_headers)
    assert r.status_code == 409


def test_create_fee_invalid_values(client, auth_headers, make_student):
    student = make_student()
    for change in ({"month": 0}, {"amount": 0}, {"status": "overdue"}):
        payload = {"student_id": student.id, "month": 6, "year": 2026, "amount": 700, **change}
        assert client.post("/api/v1/fees", json=payload, headers=auth_headers).status_code == 400


def test_update_fee_reopens(db, client, auth_headers, make_student):
    fee = ledger.create_fee(db, OWNER, make_student().id, 2, 2026, 700, status="paid", payment_method="cash")
    r = client.put(f"/api/v1/fees/{fee.id}", json={"month": 2, "year": 2026, "amount": 750, "status": "unpaid"},
                   headers=auth_headers)
    assert r.status_code == 200
    body = r.json()
    assert (body["amount"], body["status"], body["payment_method"], body["paid_at"]) == (750, "unpaid", None, None)


def test_payment_link(db, client, auth_headers, make_student):
    fee = ledger.create_fee(db, OWNER, make_student().id, 1, 2026, 700)
    body = client.get(f"/api/v1/fees/{fee.id}/payment-link", headers=auth_headers).json()

    assert body["description"] == "Aarav Sharma - January 2026 Fee"
    assert body["amount"] == 700
    assert body["upi_link"].startswith("upi://pay?pa=school@upi&pn=School%20Fee%20Account&am=700&cu=INR")
    assert body["qr_code_url"].startswith("https://api.qrserver.com/v1/create-qr-code/?size=200x200&data=upi%3A")


def test_no_payment_link_for_paid_fee(db, client, auth_headers, make_student):
    fee = ledger.create_fee(db, OWNER, make_student().id, 1, 2026, 700, status="paid")
    assert client.get(f"/api/v1/fees/{fee.id}/payment-link", headers=auth_headers).status_code == 400


def test_fee_options(client, auth_headers):
    body = client.get("/api/v1/fees/options", headers=auth_headers).json()
    year = datetime.date.today().year

    assert body["months"][0] == {"value": 1, "key": "january"}
    assert len(body["months"]) == 12
    assert body["years"] == [year - 2, year - 1, year, year + 1, year + 2]
    assert body["classes"][0] == "nursery"
    assert body["payment_methods"] == ["qr", "cash", "manual"]


def test_dashboard_totals(db, client, auth_headers, make_student):
    aarav = make_student()
    vihaan = make_student(name="Vihaan", mobile="9123456780", fee=900)
    ledger.create_fee(db, OWNER, aarav.id, 5, 2026, 700, status="paid")
    ledger.create_fee(db, OWNER, vihaan.id, 5, 2026, 900)
    ledger.create_fee(db, OWNER, vihaan.id, 6, 2026, 900, status="paid")

    body = client.get("/api/v1/dashboard?month=5&year=2026", headers=auth_headers).json()
    assert body == {"total_students": 2, "month": 5, "year": 2026, "fees_collected": 700, "pending_fees": 900}


def test_dashboard_rejects_bad_month(client, auth_headers):
    for query in ("month=13&year=2026", "month=0&year=2026", "month=5&year=0"):
        assert client.get(f"/api/v1/dashboard?{query}", headers=auth_headers).status_code == 400, query


def test_fee_view_rejects_bad_year(client, auth_headers, make_student):
    student = make_student()
    for year in (0, 1999):
        r = client.get(f"/api/v1/fees/student/{student.id}?year={year}", headers=auth_headers)
        assert r.status_code == 400, year
