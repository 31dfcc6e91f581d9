from datetime import date, time, timedelta
from decimal import Decimal

from sqlmodel import select

from barbershop.models import Appointment, Coupon, LoginAttempt

from conftest import SUNDAY, TUESDAY, next_weekday


def book(client, headers, barber_id, service_id, day, start="14:00"):
    return client.post(
        "/appointments",
        json={
            "barber_id": barber_id,
            "service_id": service_id,
            "date": day.isoformat(),
            "start_time": start,
        },
        headers=headers,
    )


def availability(client, barber_id, day):
    res = client.get(f"/barbers/{barber_id}/availability", params={"date": day.isoformat()})
    assert res.status_code == 200
    return res.json()


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok"}


def test_signup_login_and_me(client):
    res = client.post(
        "/users",
        json={"email": "carla@example.com", "password": "supersecret", "name": "Carla", "phone": "11988887777"},
    )
    assert res.status_code == 201
    body = res.json()
    assert body["role"] == "customer"
    assert body["profile_id"] is not None

    dup = client.post(
        "/users",
        json={"email": "carla@example.com", "password": "supersecret", "name": "Carla"},
    )
    assert dup.status_code == 409

    login = client.post("/auth/login", data={"username": "carla@example.com", "password": "supersecret"})
    assert login.status_code == 200
    token = login.json()["access_token"]

    me = client.get("/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == "carla@example.com"
    assert me.json()["profile_id"] == body["profile_id"]


def test_login_locks_after_repeated_failures(client, settings):
    client.post("/users", json={"email": "dani@example.com", "password": "rightpassword", "name": "Dani"})

    for _ in range(settings.login_max_attempts):
        res = client.post("/auth/login", data={"username": "dani@example.com", "password": "wrongpassword"})
        assert res.status_code == 401

    res = client.post("/auth/login", data={"username": "dani@example.com", "password": "rightpassword"})
    assert res.status_code == 429


def test_invalid_token_is_rejected(client):
    res = client.get("/me", headers={"Authorization": "Bearer not-a-token"})
    assert res.status_code == 401


def test_book_list_and_cancel_flow(client, barber, combo, customer):
    _, _, headers = customer
    barber_id, service_id = barber.id, combo.id
    tuesday = next_weekday(TUESDAY)

    before = availability(client, barber_id, tuesday)
    assert before["open"] is True
    assert len(before["available_starts"]) == 12
    assert "14:00" in before["available_starts"]

    res = book(client, headers, barber_id, service_id, tuesday)
    assert res.status_code == 201
    appt = res.json()
    assert appt["start_time"] == "14:00:00"
    assert appt["end_time"] == "14:30:00"
    assert appt["status"] == "pending"
    assert appt["paid"] is False

    assert "14:00" not in availability(client, barber_id, tuesday)["available_starts"]

    mine = client.get("/appointments/me", headers=headers)
    assert [a["id"] for a in mine.json()] == [appt["id"]]

    res = client.post(f"/appointments/{appt['id']}/cancel", headers=headers)
    assert res.status_code == 200
    assert res.json()["status"] == "cancelled"

    # retried cancel still succeeds
    res = client.post(f"/appointments/{appt['id']}/cancel", headers=headers)
    assert res.status_code == 200

    assert "14:00" in availability(client, barber_id, tuesday)["available_starts"]


def test_double_booking_returns_conflict(client, make_user, barber, combo, customer):
    _, _, first = customer
    _, _, second = make_user("bruno@example.com")
    barber_id, service_id = barber.id, combo.id
    tuesday = next_weekday(TUESDAY)

    assert book(client, first, barber_id, service_id, tuesday).status_code == 201

    res = book(client, second, barber_id, service_id, tuesday)
    assert res.status_code == 409
    assert res.json()["code"] == "slot_conflict"
    assert res.json()["retryable"] is False


def test_sunday_is_closed(client, barber, combo, customer):
    _, _, headers = customer
    barber_id, service_id = barber.id, combo.id
    sunday = next_weekday(SUNDAY)

    body = availability(client, barber_id, sunday)
    assert body["open"] is False
    assert body["available_starts"] == []

    res = book(client, headers, barber_id, service_id, sunday, start="10:00")
    assert res.status_code == 422
    assert res.json()["code"] == "validation_error"


def test_stranger_cannot_cancel(client, make_user, barber, combo, customer):
    _, _, owner = customer
    _, _, stranger = make_user("bruno@example.com")
    appt = book(client, owner, barber.id, combo.id, next_weekday(TUESDAY)).json()

    res = client.post(f"/appointments/{appt['id']}/cancel", headers=stranger)
    assert res.status_code == 403
    assert res.json()["code"] == "forbidden"


def test_unknown_appointment_is_404(client, customer):
    _, _, headers = customer
    res = client.post("/appointments/999/cancel", headers=headers)
    assert res.status_code == 404
    assert res.json()["code"] == "not_found"


def test_staff_lifecycle_and_payments(client, make_user, barber, combo, customer):
    _, _, customer_headers = customer
    _, _, staff = make_user("operador@example.com", role="staff", with_profile=False)
    _, _, admin = make_user("admin@example.com", role="admin", with_profile=False)
    tuesday = next_weekday(TUESDAY)
    appt = book(client, customer_headers, barber.id, combo.id, tuesday).json()

    assert client.post(f"/appointments/{appt['id']}/confirm", headers=customer_headers).status_code == 403

    early = client.post(f"/appointments/{appt['id']}/payments", json={"method": "pix"}, headers=staff)
    assert early.status_code == 409

    assert client.post(f"/appointments/{appt['id']}/confirm", headers=staff).json()["status"] == "confirmed"
    assert client.post(f"/appointments/{appt['id']}/complete", headers=staff).json()["status"] == "completed"

    res = client.post(f"/appointments/{appt['id']}/payments", json={"method": "pix"}, headers=customer_headers)
    assert res.status_code == 403

    res = client.post(f"/appointments/{appt['id']}/payments", json={"method": "pix"}, headers=staff)
    assert res.status_code == 201
    assert Decimal(str(res.json()["amount"])) == Decimal("60")

    listed = client.get("/appointments", params={"on_date": tuesday.isoformat()}, headers=staff)
    assert listed.status_code == 200
    assert listed.json()[0]["paid"] is True

    assert client.get("/appointments", headers=customer_headers).status_code == 403

    summary = client.get("/payments/summary", params={"period": "month"}, headers=admin)
    assert summary.status_code == 200
    body = summary.json()
    assert body["transactions"] == 1
    assert Decimal(str(body["total_revenue"])) == Decimal("60")
    assert Decimal(str(body["average_ticket"])) == Decimal("60")

    assert client.get("/payments/summary", headers=staff).status_code == 403


def test_staff_can_book_for_customer(client, make_user, barber, combo, customer):
    _, profile_id, _ = customer
    _, _, staff = make_user("operador@example.com", role="staff", with_profile=False)

    res = client.post(
        "/appointments",
        json={
            "barber_id": barber.id,
            "service_id": combo.id,
            "date": next_weekday(TUESDAY).isoformat(),
            "start_time": "10:00",
            "customer_id": profile_id,
        },
        headers=staff,
    )
    assert res.status_code == 201
    assert res.json()["customer_id"] == profile_id


def test_admin_manages_catalog(client, make_user, customer):
    _, _, customer_headers = customer
    _, _, admin = make_user("admin@example.com", role="admin", with_profile=False)

    payload = {"name": "Corte", "price": "40.00", "duration": 40}
    assert client.post("/services", json=payload, headers=customer_headers).status_code == 403

    res = client.post("/services", json=payload, headers=admin)
    assert res.status_code == 201
    service_id = res.json()["id"]

    assert client.post("/services", json={**payload, "duration": 0}, headers=admin).status_code == 422

    res = client.post("/barbers", json={"name": "Tiago"}, headers=admin)
    assert res.status_code == 201
    barber_id = res.json()["id"]

    assert [s["id"] for s in client.get("/services").json()] == [service_id]
    assert [b["id"] for b in client.get("/barbers").json()] == [barber_id]

    res = client.patch(f"/services/{service_id}", json={"active": False}, headers=admin)
    assert res.json()["active"] is False
    assert client.get("/services").json() == []

    res = book(client, customer_headers, barber_id, service_id, next_weekday(TUESDAY), start="10:00")
    assert res.status_code == 422

    client.patch(f"/barbers/{barber_id}", json={"active": False}, headers=admin)
    assert client.get("/barbers").json() == []
    res = client.get(f"/barbers/{barber_id}/availability", params={"date": next_weekday(TUESDAY).isoformat()})
    assert res.status_code == 404


def test_admin_changes_role(client, make_user):
    user, profile_id, headers = make_user("eva@example.com")
    _, _, admin = make_user("admin@example.com", role="admin", with_profile=False)
    user_id = user.id

    assert client.put(f"/users/{user_id}/role", json={"role": "staff"}, headers=headers).status_code == 403

    res = client.put(f"/users/{user_id}/role", json={"role": "staff"}, headers=admin)
    assert res.status_code == 200
    assert res.json()["role"] == "staff"
    assert res.json()["profile_id"] == profile_id


def test_gallery(client, make_user):
    _, _, admin = make_user("admin@example.com", role="admin", with_profile=False)

    res = client.post("/gallery", json={"url": "https://cdn.example.com/fade.jpg", "alt": "Fade"}, headers=admin)
    assert res.status_code == 201
    image_id = res.json()["id"]

    assert [i["alt"] for i in client.get("/gallery").json()] == ["Fade"]

    assert client.delete(f"/gallery/{image_id}", headers=admin).status_code == 204
    assert client.get("/gallery").json() == []
    assert client.delete(f"/gallery/{image_id}", headers=admin).status_code == 404


def test_promotions_hide_expired_coupons(client, session, make_user):
    _, _, admin = make_user("admin@example.com", role="admin", with_profile=False)
    session.add(Coupon(code="OLD10", discount=10, valid_until=date.today() - timedelta(days=1)))
    session.commit()

    coupon = {"code": "BARBA20", "discount": 20, "valid_until": (date.today() + timedelta(days=30)).isoformat()}
    assert client.post("/promotions/coupons", json=coupon, headers=admin).status_code == 201
    assert client.post("/promotions/coupons", json=coupon, headers=admin).status_code == 409

    plan = {"name": "Mensal", "price": "120.00", "discount": 15, "duration_months": 1}
    assert client.post("/promotions/plans", json=plan, headers=admin).status_code == 201

    body = client.get("/promotions").json()
    assert [c["code"] for c in body["coupons"]] == ["BARBA20"]
    assert [p["name"] for p in body["plans"]] == ["Mensal"]


def test_unknown_emails_leave_no_login_rows(client, session):
    for i in range(20):
        res = client.post("/auth/login", data={"username": f"nobody{i}@example.com", "password": "whatever1"})
        assert res.status_code == 401

    assert session.exec(select(LoginAttempt)).all() == []


def test_successful_login_clears_failures(client, session):
    client.post("/users", json={"email": "fabi@example.com", "password": "rightpassword", "name": "Fabi"})

    client.post("/auth/login", data={"username": "fabi@example.com", "password": "wrongpassword"})
    assert len(session.exec(select(LoginAttempt)).all()) == 1

    res = client.post("/auth/login", data={"username": "fabi@example.com", "password": "rightpassword"})
    assert res.status_code == 200
    session.expire_all()
    assert session.exec(select(LoginAttempt)).all() == []


def test_payments_are_listed_newest_first(client, make_user, barber, combo, customer):
    _, _, customer_headers = customer
    _, _, staff = make_user("operador@example.com", role="staff", with_profile=False)
    barber_id, service_id = barber.id, combo.id
    tuesday = next_weekday(TUESDAY)

    ids = []
    for start, method in [("10:00", "cash"), ("10:40", "credit_card")]:
        appt = book(client, customer_headers, barber_id, service_id, tuesday, start=start).json()
        client.post(f"/appointments/{appt['id']}/confirm", headers=staff)
        client.post(f"/appointments/{appt['id']}/complete", headers=staff)
        res = client.post(f"/appointments/{appt['id']}/payments", json={"method": method}, headers=staff)
        ids.append(res.json()["id"])

    assert client.get("/payments", headers=customer_headers).status_code == 403

    res = client.get("/payments", params={"period": "month"}, headers=staff)
    assert res.status_code == 200
    listed = res.json()
    assert [p["id"] for p in listed] == list(reversed(ids))
    assert listed[0]["method"] == "credit_card"
    assert listed[0]["customer_name"] == "ana"
    assert listed[0]["service_name"] == "Combo Corte + Barba"
    assert listed[0]["date"] == tuesday.isoformat()


def test_payment_for_missing_service_needs_explicit_amount(client, session, make_user, customer):
    _, profile_id, _ = customer
    _, _, staff = make_user("operador@example.com", role="staff", with_profile=False)
    orphan = Appointment(
        customer_id=profile_id,
        barber_id=1,
        service_id=999,
        date=next_weekday(TUESDAY),
        start_time=time(10, 0),
        end_time=time(10, 30),
        status="completed",
    )
    session.add(orphan)
    session.commit()
    appt_id = orphan.id

    res = client.post(f"/appointments/{appt_id}/payments", json={"method": "pix"}, headers=staff)
    assert res.status_code == 422

    res = client.post(f"/appointments/{appt_id}/payments", json={"method": "pix", "amount": "45.00"}, headers=staff)
    assert res.status_code == 201
    assert Decimal(str(res.json()["amount"])) == Decimal("45")
