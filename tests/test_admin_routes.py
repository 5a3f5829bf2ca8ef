from datetime import datetime

from models import db
from models.membership import Membership
from models.membership_plan import MembershipPlan
from models.time_slot import TimeSlot
from services.memberships import DEFAULT_PLANS, seed_plans

from conftest import tomorrow


def test_admin_routes_require_admin(login, member):
    resp = login(member).post("/admin/timeslots", json={})
    assert resp.status_code == 403


def test_create_and_cancel_timeslot(login, make_user):
    client = login(make_user(role="admin"))
    day = tomorrow().isoformat()

    resp = client.post("/admin/timeslots", json={
        "date": day, "startTime": "18:00", "endTime": "19:30", "capacity": 8, "type": "Women only",
    })
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["capacity"] == 8
    assert body["bookedCount"] == 0
    assert body["status"] == "available"

    resp = client.post(f"/admin/timeslots/{body['id']}/cancel")
    assert resp.status_code == 200
    assert db.session.get(TimeSlot, body["id"]).is_cancelled is True


def test_timeslot_validation(login, make_user):
    client = login(make_user(role="superadmin"))
    day = tomorrow().isoformat()
    bad = [
        {"date": day, "startTime": "19:00", "endTime": "18:00", "capacity": 4},
        {"date": day, "startTime": "18:00", "endTime": "19:00", "capacity": 0},
        {"date": "tomorrow", "startTime": "18:00", "endTime": "19:00", "capacity": 4},
        {"startTime": "18:00", "endTime": "19:00", "capacity": 4},
    ]
    for payload in bad:
        assert client.post("/admin/timeslots", json=payload).status_code == 400


def test_timeslot_text_fields_must_be_strings(login, make_user):
    client = login(make_user(role="admin"))
    slot = {"date": tomorrow().isoformat(), "startTime": "18:00", "endTime": "19:00", "capacity": 4}

    for extra in ({"type": ["Women only"]}, {"description": {"en": "Quiet"}}, {"type": "x" * 81}):
        resp = client.post("/admin/timeslots", json={**slot, **extra})
        assert resp.status_code == 400
    assert TimeSlot.query.count() == 0

    resp = client.post("/admin/timeslots", json={**slot, "type": "  Aufguss  ", "description": None})
    assert resp.status_code == 201
    assert db.session.get(TimeSlot, resp.get_json()["id"]).type == "Aufguss"


def test_admin_rejects_malformed_bodies_and_ids(login, make_user, make_plan):
    client = login(make_user(role="admin"))
    plan = make_plan()

    resp = client.post("/admin/plans", json=["Punch 3", "punch_card"])
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Invalid request body"}

    resp = client.post("/admin/memberships", json={"userId": 2**70, "planId": plan.id})
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "userId is required"}

    day = tomorrow().isoformat()
    resp = client.post("/admin/timeslots", json={"date": day, "startTime": "18:00", "endTime": "19:00", "capacity": 2**63})
    assert resp.status_code == 400

    resp = client.post(f"/admin/timeslots/{2**70}/cancel")
    assert resp.status_code == 404


def test_create_plan_enforces_shape(login, make_user):
    client = login(make_user(role="admin"))

    ok = client.post("/admin/plans", json={"name": "Punch 3", "type": "punch_card", "totalCredits": 3, "priceCents": 4500})
    assert ok.status_code == 201
    assert ok.get_json()["totalCredits"] == 3

    assert client.post("/admin/plans", json={"name": "Bad", "type": "punch_card"}).status_code == 400
    assert client.post("/admin/plans", json={"name": "Bad", "type": "subscription", "totalCredits": 2}).status_code == 400
    assert client.post("/admin/plans", json={"name": "Bad", "type": "yearly"}).status_code == 400
    assert client.post("/admin/plans", json={"name": "Bad", "type": "subscription", "description": 7}).status_code == 400
    assert client.post("/admin/plans", json={"name": "Bad", "type": "subscription", "priceCents": -1}).status_code == 400
    assert client.post("/admin/plans", json={"name": "Bad", "type": "subscription", "creditsPerMonth": 2**40}).status_code == 400


def test_assign_membership_sets_expiry_from_plan(login, make_user, make_plan):
    client = login(make_user(role="admin"))
    member = make_user()
    plan = make_plan(type="punch_card", total_credits=5, validity_months=3)

    resp = client.post("/admin/memberships", json={
        "userId": member.id, "planId": plan.id, "startsAt": "2026-01-31T00:00:00",
    })

    assert resp.status_code == 201
    row = Membership.query.filter_by(user_id=member.id).one()
    assert row.status == "active"
    assert row.expires_at == datetime(2026, 4, 30)


def test_assign_membership_unknown_user(login, make_user, make_plan):
    client = login(make_user(role="admin"))
    resp = client.post("/admin/memberships", json={"userId": 999, "planId": make_plan().id})
    assert resp.status_code == 404
    assert resp.get_json() == {"error": "User not found"}


def test_seed_plans_is_idempotent(app):
    assert seed_plans() == len(DEFAULT_PLANS)
    assert seed_plans() == 0
    names = {p.name for p in MembershipPlan.query.all()}
    assert {"Trial", "Unlimited Monthly", "Punch Card 10"} <= names


def test_plans_catalogue(login, member, make_plan):
    hidden = make_plan(name="Retired")
    hidden.is_active = False
    db.session.commit()

    rows = login(member).get("/plans").get_json()
    assert "Retired" not in {r["name"] for r in rows}


def test_seed_plans_cli(app):
    result = app.test_cli_runner().invoke(args=["seed-plans"])
    assert f"Added {len(DEFAULT_PLANS)} membership plans" in result.output
