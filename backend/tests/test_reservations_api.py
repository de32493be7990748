import pytest
from fastapi.testclient import TestClient

from sqlalchemy import text

from airline_ops.core.errors import TransactionAborted
from airline_ops.db.session import get_db
from airline_ops.main import app
from airline_ops.models.user import User
from airline_ops.services.allocator import ReservationAllocator

from conftest import seed_flight


@pytest.fixture()
def client(db):
    def override_get_db():
        s = db.session_factory()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.pop(get_db, None)


def register(client, username: str, role: str, password: str = "testpass"):
    r = client.post("/auth/register", json={"username": username, "password": password, "role": role})
    assert r.status_code == 200, r.text
    return r.json()


def login(client, username: str, role: str = "customer") -> dict:
    register(client, username, role)
    r = client.post("/auth/login-json", json={"username": username, "password": "testpass"})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


def test_register_customer_gets_customer_record(client):
    data = register(client, "alice", "customer")
    assert data["role"] == "customer"
    assert data["customer_id"] is not None
    staff = register(client, "bob", "pilot")
    assert staff["customer_id"] is None


def test_register_rejects_unknown_role_and_duplicates(client):
    r = client.post("/auth/register", json={"username": "eve", "password": "x", "role": "admin"})
    assert r.status_code == 422
    register(client, "carol", "technician")
    r = client.post("/auth/register", json={"username": "carol", "password": "x", "role": "customer"})
    assert r.status_code == 400


def test_form_login_and_bad_password(client):
    register(client, "dave", "customer")
    r = client.post("/auth/login", data={"username": "dave", "password": "testpass"})
    assert r.status_code == 200
    assert r.json()["token_type"] == "bearer"
    r = client.post("/auth/login-json", json={"username": "dave", "password": "nope"})
    assert r.status_code == 401


def test_book_then_waitlist_then_cancel(client, db):
    flight_id = seed_flight(db.session_factory, seats=1)
    first = login(client, "user1")
    second = login(client, "user2")

    r1 = client.post("/reservations", json={"flight_instance_id": flight_id}, headers=first)
    assert r1.status_code == 200, r1.text
    assert r1.json() == {"reservation_id": "R0001", "status": "CONFIRMED"}

    r2 = client.post("/reservations", json={"flight_instance_id": flight_id}, headers=second)
    assert r2.status_code == 200
    assert r2.json() == {"reservation_id": "R0002", "status": "WAITLISTED"}

    r3 = client.get("/reservations/R0002", headers=second)
    assert r3.status_code == 200
    assert r3.json()["status"] == "WAITLISTED"
    # Other customers cannot see or cancel it
    assert client.get("/reservations/R0002", headers=first).status_code == 404
    assert client.post("/reservations/R0002/cancel", headers=first).status_code == 403

    c1 = client.post("/reservations/R0001/cancel", headers=first)
    assert c1.status_code == 200
    assert c1.json()["changed"] is True
    assert c1.json()["previous_status"] == "CONFIRMED"
    c2 = client.post("/reservations/R0001/cancel", headers=first)
    assert c2.status_code == 200
    assert c2.json()["changed"] is False


def test_capacity_is_management_only(client, db):
    flight_id = seed_flight(db.session_factory, seats=3)
    customer = login(client, "user3")
    manager = login(client, "boss", role="management")
    client.post("/reservations", json={"flight_instance_id": flight_id}, headers=customer)

    r = client.get(f"/flights/{flight_id}/capacity", headers=manager)
    assert r.status_code == 200
    assert r.json() == {"flight_instance_id": flight_id, "seats_total": 3, "seats_sold": 1, "seats_available": 2}
    assert client.get(f"/flights/{flight_id}/capacity", headers=customer).status_code == 403
    assert client.get("/flights/999/capacity", headers=manager).status_code == 404


def test_denied_roles_never_reach_the_allocator(client, db):
    flight_id = seed_flight(db.session_factory, seats=2)
    tech = login(client, "tech1", role="technician")
    manager = login(client, "boss2", role="management")
    r = client.post("/reservations", json={"flight_instance_id": flight_id}, headers=tech)
    assert r.status_code == 403
    assert "may not perform" in r.json()["detail"]
    assert client.post("/reservations", json={"flight_instance_id": flight_id}, headers=manager).status_code == 403
    r = client.get(f"/flights/{flight_id}/capacity", headers=manager)
    assert r.json()["seats_sold"] == 0


def test_missing_or_bad_token(client, db):
    flight_id = seed_flight(db.session_factory, seats=2)
    assert client.post("/reservations", json={"flight_instance_id": flight_id}).status_code == 401
    r = client.post("/reservations", json={"flight_instance_id": flight_id}, headers={"Authorization": "Bearer junk"})
    assert r.status_code == 401


def test_book_unknown_flight_is_404(client):
    headers = login(client, "user4")
    r = client.post("/reservations", json={"flight_instance_id": 4242}, headers=headers)
    assert r.status_code == 404
    assert "flight instance" in r.json()["detail"]


def test_health(client):
    assert client.get("/health/").json() == {"status": "ok"}


def test_register_strips_username(client, db):
    r = client.post("/auth/register", json={"username": "   ", "password": "x", "role": "customer"})
    assert r.status_code == 422
    data = register(client, "  frank  ", "customer")
    assert data["username"] == "frank"
    with db.session_factory() as s:
        assert s.query(User).filter(User.username == "").count() == 0
    r = client.post("/auth/login-json", json={"username": "frank", "password": "testpass"})
    assert r.status_code == 200


def test_booking_conflict_is_409(client, db):
    flight_id = seed_flight(db.session_factory, seats=2)
    headers = login(client, "user5")
    assert client.post("/reservations", json={"flight_instance_id": flight_id}, headers=headers).status_code == 200
    with db.session_factory() as s:
        s.execute(text("UPDATE reservation_counters SET value = 0"))
        s.commit()

    r = client.post("/reservations", json={"flight_instance_id": flight_id}, headers=headers)
    assert r.status_code == 409
    assert r.json()["detail"]
    manager = login(client, "boss3", role="management")
    assert client.get(f"/flights/{flight_id}/capacity", headers=manager).json()["seats_sold"] == 1


def test_aborted_commit_is_503(client, db, monkeypatch):
    flight_id = seed_flight(db.session_factory, seats=2)
    headers = login(client, "user6")

    def aborted(self, customer_id, flight_instance_id):
        raise TransactionAborted("commit failed")

    monkeypatch.setattr(ReservationAllocator, "book", aborted)
    r = client.post("/reservations", json={"flight_instance_id": flight_id}, headers=headers)
    assert r.status_code == 503
    assert r.json() == {"detail": "commit failed"}
