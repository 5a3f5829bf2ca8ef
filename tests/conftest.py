"""
Pytest fixtures.

Every test gets a fresh SQLite *file* database (not :memory:) so the
concurrency tests can open real parallel connections against it.
"""
import functools
import itertools
from datetime import date, datetime, time, timedelta

import pytest

from app import create_app
from config import Config
from models import db
from models.booking import Booking
from models.membership import Membership
from models.membership_plan import MembershipPlan
from models.time_slot import TimeSlot
from models.user import User
from security.password import hash_password

PASSWORD = "correct-horse-battery"


class TestingConfig(Config):
    __test__ = False

    TESTING = True
    SECRET_KEY = "test-secret"
    CSRF_ENABLED = False
    SQLALCHEMY_ENGINE_OPTIONS = {"connect_args": {"check_same_thread": False, "timeout": 30}}


@functools.lru_cache(maxsize=1)
def _password_hash():
    return hash_password(PASSWORD)


@pytest.fixture
def app(tmp_path):
    class _Config(TestingConfig):
        SQLALCHEMY_DATABASE_URI = "sqlite:///" + str(tmp_path / "test.db")

    app = create_app(_Config)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def now():
    # Mid-month, mid-day: far from every month and day boundary
    return datetime(2026, 3, 15, 12, 0)


@pytest.fixture
def make_user(app):
    counter = itertools.count(1)

    def _make(email=None, role="member"):
        n = next(counter)
        user = User(
            email=email or f"member{n}@example.com",
            password_hash=_password_hash(),
            first_name=f"Member{n}",
            phone="+31000000000",
            role=role,
        )
        db.session.add(user)
        db.session.commit()
        return user

    return _make


@pytest.fixture
def make_plan(app):
    def _make(type="subscription", credits_per_month=None, total_credits=None, validity_months=None, name=None):
        plan = MembershipPlan(
            name=name or f"{type} plan",
            type=type,
            price_cents=1000,
            credits_per_month=credits_per_month,
            total_credits=total_credits,
            validity_months=validity_months,
        )
        db.session.add(plan)
        db.session.commit()
        return plan

    return _make


@pytest.fixture
def make_membership(app):
    def _make(user, plan, starts_at=datetime(2026, 1, 1), expires_at=None, status="active", created_at=None):
        membership = Membership(
            user_id=user.id,
            plan_id=plan.id,
            status=status,
            starts_at=starts_at,
            expires_at=expires_at,
            created_at=created_at or starts_at,
        )
        db.session.add(membership)
        db.session.commit()
        return membership

    return _make


@pytest.fixture
def make_slot(app):
    def _make(day=date(2026, 3, 20), start=time(18, 0), end=time(19, 30), capacity=5, is_cancelled=False, type=None):
        slot = TimeSlot(
            date=day,
            start_time=start,
            end_time=end,
            capacity=capacity,
            type=type,
            is_cancelled=is_cancelled,
        )
        db.session.add(slot)
        db.session.commit()
        return slot

    return _make


@pytest.fixture
def member(make_user, make_plan, make_membership):
    """A member on an unlimited subscription."""
    user = make_user()
    make_membership(user, make_plan(), starts_at=datetime.now() - timedelta(days=30))
    return user


@pytest.fixture
def login(app):
    def _login(user):
        client = app.test_client()
        resp = client.post("/auth/login", json={"email": user.email, "password": PASSWORD})
        assert resp.status_code == 200
        return client

    return _login


def confirmed_count(slot_id):
    return Booking.query.filter_by(timeslot_id=slot_id, status="confirmed").count()


def tomorrow():
    return date.today() + timedelta(days=1)
