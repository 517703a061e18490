from datetime import date
from types import SimpleNamespace

import pytest

from app import create_app
from configs import db
from dao import category as category_dao
from db.models.user import User, UserRole


@pytest.fixture
def app():
    app = create_app({"SQLALCHEMY_DATABASE_URI": "sqlite://", "TESTING": True})
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def categories(app):
    created = category_dao.add_categories(["PP KOTOR", "METALIS", "SLITING"])
    return {c.name: c for c in created}


def _make_user(username, role):
    u = User(
        username=username,
        full_name=username.title(),
        role=role,
        is_active=True,
    )
    u.set_password("secret")
    db.session.add(u)
    db.session.commit()
    return u


@pytest.fixture
def admin_user(app):
    return _make_user("admin", UserRole.ADMIN)


@pytest.fixture
def operator_user(app):
    return _make_user("operator", UserRole.OPERATOR)


def _login(client, username):
    resp = client.post("/auth/login", data={"username": username, "password": "secret"})
    assert resp.status_code == 302
    return client


@pytest.fixture
def client(app, admin_user):
    return _login(app.test_client(), "admin")


@pytest.fixture
def operator_client(app, operator_user):
    return _login(app.test_client(), "operator")


# ---------- plain objects for the pure report functions ----------
def make_item(name, weight, seq=1, satuan=""):
    category = SimpleNamespace(name=name) if name else None
    return SimpleNamespace(
        category=category, weight_kg=weight, sequence_number=seq, satuan=satuan
    )


def make_session(sid, d, items, pic="Budi", owner="Toko A"):
    return SimpleNamespace(
        id=sid,
        transaction_date=d,
        pic_name=pic,
        owner_name=owner,
        items=items,
        gabungan=None,
        start_time=None,
        end_time=None,
    )


@pytest.fixture
def december_sessions():
    return [
        make_session(
            "s1",
            date(2025, 12, 3),
            [make_item("PP KOTOR", 10, 1, "SAK"), make_item("METALIS", 5, 2, "BAL")],
        ),
        make_session(
            "s2",
            date(2025, 12, 20),
            [make_item("PP KOTOR", 15, 1), make_item("SLITING", 20, 2)],
            pic="Sari",
            owner="Toko B",
        ),
    ]
