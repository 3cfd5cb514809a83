"""Bearer token classification and principal guards."""

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from restohub import main as main_module
from restohub.core.config import settings
from restohub.core.security import (
    AuthError,
    CustomerPrincipal,
    StaffPrincipal,
    create_customer_token,
    create_staff_token,
    decode_principal,
    get_password_hash,
)
from restohub.db import session as db_session
from restohub.db.base import Base
from restohub.main import app
from restohub.models import Customer, Staff


def _prepare_db(tmp_path: Path, monkeypatch) -> sessionmaker:
    engine = create_engine(f"sqlite:///{tmp_path / 'auth.db'}", connect_args={"check_same_thread": False})
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)
    monkeypatch.setattr(main_module, "engine", engine)
    monkeypatch.setattr(main_module, "SessionLocal", testing_session_local)
    monkeypatch.setattr(settings, "job_sweep_enabled", False)
    monkeypatch.setattr(settings, "media_root", str(tmp_path / "media"))
    return testing_session_local


def _seed_accounts(session_local: sessionmaker) -> tuple[Staff, Staff, Customer]:
    with session_local() as db:
        manager = Staff(name="Mia Manager", email="mia@resto.vn", password_hash=get_password_hash("secret"), role="Manager", pay_rate=50000)
        chef = Staff(name="Chris Chef", email="chris@resto.vn", password_hash=get_password_hash("secret"), role="Chef", pay_rate=40000)
        customer = Customer(
            name="Lan Nguyen",
            phone="0901234567",
            email="lan@example.com",
            password_hash=get_password_hash("secret"),
            loyalty_points=0,
        )
        db.add_all([manager, chef, customer])
        db.commit()
        for row in (manager, chef, customer):
            db.refresh(row)
            db.expunge(row)
        return manager, chef, customer


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def test_decode_principal_returns_tagged_principals() -> None:
    staff = Staff(id=7, name="Chef", email="chef@resto.vn", password_hash="x", role="Chef")
    customer = Customer(id=3, name="Lan", phone="0901234567", email="lan@example.com", password_hash="x")

    assert decode_principal(create_staff_token(staff)) == StaffPrincipal(staff_id=7, role="Chef")
    assert decode_principal(create_customer_token(customer)) == CustomerPrincipal(customer_id=3)


@pytest.mark.parametrize(
    ("token", "kind"),
    [
        (None, "missing"),
        ("", "missing"),
        ("not-a-jwt", "malformed"),
        (jwt.encode({"sub": "1", "type": "staff"}, "some-other-secret", algorithm="HS256"), "invalid-signature"),
        (jwt.encode({"sub": "abc", "type": "staff"}, settings.jwt_secret_key, algorithm="HS256"), "malformed"),
        (jwt.encode({"sub": "1", "type": "partner"}, settings.jwt_secret_key, algorithm="HS256"), "wrong-audience"),
    ],
)
def test_decode_principal_classifies_failures(token: str | None, kind: str) -> None:
    with pytest.raises(AuthError) as excinfo:
        decode_principal(token)
    assert excinfo.value.kind == kind


def test_expired_token_is_classified_as_expired() -> None:
    expired = jwt.encode(
        {"sub": "1", "type": "staff", "exp": datetime.now(timezone.utc) - timedelta(minutes=5)},
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )
    with pytest.raises(AuthError) as excinfo:
        decode_principal(expired)
    assert excinfo.value.kind == "expired"
    assert excinfo.value.to_http().status_code == 401


def test_guard_status_codes(tmp_path: Path, monkeypatch) -> None:
    session_local = _prepare_db(tmp_path, monkeypatch)
    manager, chef, customer = _seed_accounts(session_local)

    with TestClient(app) as client:
        missing = client.get("/api/v1/staff/me")
        assert missing.status_code == 401
        assert missing.json()["detail"] == "No token provided"

        garbage = client.get("/api/v1/staff/me", headers=_bearer("garbage"))
        assert garbage.status_code == 403

        forged = jwt.encode({"sub": str(chef.id), "type": "staff", "role": "Manager"}, "forged", algorithm="HS256")
        assert client.get("/api/v1/staff/me", headers=_bearer(forged)).status_code == 403

        customer_on_staff_route = client.get("/api/v1/staff/me", headers=_bearer(create_customer_token(customer)))
        assert customer_on_staff_route.status_code == 403
        assert customer_on_staff_route.json()["detail"] == "Access denied for this token type"

        staff_on_customer_route = client.get("/api/v1/customers/profile", headers=_bearer(create_staff_token(chef)))
        assert staff_on_customer_route.status_code == 403

        me = client.get("/api/v1/staff/me", headers=_bearer(create_staff_token(chef)))
        assert me.status_code == 200
        assert me.json()["email"] == "chris@resto.vn"

        not_manager = client.get("/api/v1/staff/salaries", headers=_bearer(create_staff_token(chef)))
        assert not_manager.status_code == 403
        assert not_manager.json()["detail"] == "Manager role required"

        as_manager = client.get("/api/v1/staff/salaries?month=1&year=2026", headers=_bearer(create_staff_token(manager)))
        assert as_manager.status_code == 200


def test_token_for_deleted_staff_is_rejected(tmp_path: Path, monkeypatch) -> None:
    session_local = _prepare_db(tmp_path, monkeypatch)
    _, chef, _ = _seed_accounts(session_local)
    token = create_staff_token(chef)

    with session_local() as db:
        db.delete(db.get(Staff, chef.id))
        db.commit()

    with TestClient(app) as client:
        response = client.get("/api/v1/staff/me", headers=_bearer(token))
        assert response.status_code == 401
        assert response.json()["detail"] == "Staff user not found"
