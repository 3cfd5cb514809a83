"""Shift scheduling, staff management and payroll."""

from datetime import date, timedelta
from pathlib import Path

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker

from restohub import main as main_module
from restohub.core.config import settings
from restohub.core.security import create_staff_token, get_password_hash
from restohub.db import session as db_session
from restohub.db.base import Base
from restohub.main import app
from restohub.models import Schedule, Staff


def _prepare_db(tmp_path: Path, monkeypatch) -> sessionmaker:
    engine = create_engine(f"sqlite:///{tmp_path / 'schedules.db'}", connect_args={"check_same_thread": False})
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)
    monkeypatch.setattr(main_module, "engine", engine)
    monkeypatch.setattr(main_module, "SessionLocal", testing_session_local)
    monkeypatch.setattr(settings, "job_sweep_enabled", False)
    monkeypatch.setattr(settings, "media_root", str(tmp_path / "media"))
    return testing_session_local


def _seed(session_local: sessionmaker) -> dict:
    with session_local() as db:
        manager = Staff(name="Mia Manager", email="mia@resto.vn", password_hash=get_password_hash("secret"), role="Manager", pay_rate=50000)
        chef = Staff(name="Chris Chef", email="chris@resto.vn", password_hash=get_password_hash("secret"), role="Chef", pay_rate=40000)
        db.add_all([manager, chef])
        db.commit()
        return {
            "manager": {"Authorization": f"Bearer {create_staff_token(manager)}"},
            "chef": {"Authorization": f"Bearer {create_staff_token(chef)}"},
            "manager_id": manager.id,
            "chef_id": chef.id,
        }


def test_create_blocks_and_assignments(tmp_path: Path, monkeypatch) -> None:
    seed = _seed(_prepare_db(tmp_path, monkeypatch))
    shift_day = date.today() + timedelta(days=1)

    with TestClient(app) as client:
        block = client.post("/api/v1/schedules", json={"shift_date": shift_day.isoformat(), "shift": "morning"}, headers=seed["chef"])
        assert block.status_code == 201
        assert block.json()["shift"] == "Morning"
        assert block.json()["staff_id"] is None

        again = client.post("/api/v1/schedules", json={"shift_date": shift_day.isoformat(), "shift": "Morning"}, headers=seed["chef"])
        assert again.status_code == 409

        assigned = client.post(
            "/api/v1/schedules",
            json={"shift_date": shift_day.isoformat(), "shift": "Morning", "staff_id": seed["chef_id"]},
            headers=seed["chef"],
        )
        assert assigned.status_code == 201

        double = client.post(
            "/api/v1/schedules",
            json={"shift_date": shift_day.isoformat(), "shift": "Morning", "staff_id": seed["chef_id"]},
            headers=seed["chef"],
        )
        assert double.status_code == 409

        ghost = client.post(
            "/api/v1/schedules",
            json={"shift_date": shift_day.isoformat(), "shift": "Evening", "staff_id": 999},
            headers=seed["chef"],
        )
        assert ghost.status_code == 404

        past = client.post(
            "/api/v1/schedules",
            json={"shift_date": (date.today() - timedelta(days=1)).isoformat(), "shift": "Evening"},
            headers=seed["chef"],
        )
        assert past.status_code == 400
        assert past.json()["detail"] == "Cannot create a shift before today."

        night = client.post("/api/v1/schedules", json={"shift_date": shift_day.isoformat(), "shift": "Night"}, headers=seed["chef"])
        assert night.status_code == 400

        week = client.get("/api/v1/schedules/week", params={"startDate": date.today().isoformat()}, headers=seed["chef"]).json()
        assert len(week) == 1
        assert week[0]["date"] == shift_day.day
        morning = week[0]["shifts"][0]
        assert morning["time"] == "08:00 - 15:00"
        assert [member["name"] for member in morning["staff"]] == ["Chris Chef"]

        schedule_id = morning["staff"][0]["schedule_id"]
        assert client.delete(f"/api/v1/schedules/{schedule_id}", headers=seed["chef"]).status_code == 204
        assert client.delete(f"/api/v1/schedules/{schedule_id}", headers=seed["chef"]).status_code == 404


def test_delete_whole_block(tmp_path: Path, monkeypatch) -> None:
    session_local = _prepare_db(tmp_path, monkeypatch)
    seed = _seed(session_local)
    shift_day = date.today() + timedelta(days=2)
    with session_local() as db:
        db.add_all(
            [
                Schedule(shift_date=shift_day, shift="Evening"),
                Schedule(shift_date=shift_day, shift="Evening", staff_id=seed["chef_id"]),
                Schedule(shift_date=shift_day, shift="Morning", staff_id=seed["chef_id"]),
            ]
        )
        db.commit()

    with TestClient(app) as client:
        body = {"shift_date": shift_day.isoformat(), "shift": "evening"}
        assert client.request("DELETE", "/api/v1/schedules", json=body, headers=seed["chef"]).status_code == 204
        assert client.request("DELETE", "/api/v1/schedules", json=body, headers=seed["chef"]).status_code == 404

    with session_local() as db:
        remaining = db.scalars(select(Schedule)).all()
        assert [entry.shift for entry in remaining] == ["Morning"]


def test_month_views_and_payroll(tmp_path: Path, monkeypatch) -> None:
    session_local = _prepare_db(tmp_path, monkeypatch)
    seed = _seed(session_local)
    with session_local() as db:
        for day in (3, 4, 10):
            db.add(Schedule(shift_date=date(2026, 2, day), shift="Morning", staff_id=seed["chef_id"]))
        db.add(Schedule(shift_date=date(2026, 2, 10), shift="Evening", staff_id=seed["chef_id"]))
        db.add(Schedule(shift_date=date(2026, 3, 1), shift="Morning", staff_id=seed["chef_id"]))
        db.add(Schedule(shift_date=date(2026, 2, 3), shift="Evening", staff_id=seed["manager_id"]))
        db.commit()

    with TestClient(app) as client:
        mine = client.get(
            "/api/v1/schedules/employee",
            params={"employeeId": seed["chef_id"], "month": 2, "year": 2026},
            headers=seed["chef"],
        ).json()
        assert len(mine) == 4

        month = client.post("/api/v1/schedules/month", json={"month": 2, "year": 2026}, headers=seed["chef"]).json()
        assert month["month"] == 2
        assert [day["date"] for day in month["schedule"]] == [3, 4, 10]

        salary = client.get("/api/v1/staff/salary", params={"month": 2, "year": 2026}, headers=seed["chef"]).json()
        assert salary["working_shifts"] == 4
        assert salary["working_hours"] == 32
        assert salary["total_pay"] == 32 * 40000

        salaries = client.get("/api/v1/staff/salaries", params={"month": 2, "year": 2026}, headers=seed["manager"]).json()
        assert {row["name"]: row["total_pay"] for row in salaries} == {
            "Mia Manager": 8 * 50000,
            "Chris Chef": 32 * 40000,
        }


def test_staff_login_and_management(tmp_path: Path, monkeypatch) -> None:
    session_local = _prepare_db(tmp_path, monkeypatch)
    seed = _seed(session_local)

    with TestClient(app) as client:
        login = client.post("/api/v1/staff/login", json={"email": "chris@resto.vn", "password": "secret"})
        assert login.status_code == 200
        assert login.json()["staff"]["role"] == "Chef"
        assert client.post("/api/v1/staff/login", json={"email": "chris@resto.vn", "password": "bad"}).status_code == 401

        new_staff = {"name": "Sam Shipper", "email": "sam@resto.vn", "password": "ride", "role": "Shipper", "pay_rate": 30000}
        assert client.post("/api/v1/staff", json=new_staff, headers=seed["chef"]).status_code == 403

        created = client.post("/api/v1/staff", json=new_staff, headers=seed["manager"])
        assert created.status_code == 201
        sam_id = created.json()["id"]
        assert client.post("/api/v1/staff", json=new_staff, headers=seed["manager"]).status_code == 409

        updated = client.put(f"/api/v1/staff/{sam_id}", json={"pay_rate": 35000}, headers=seed["manager"])
        assert updated.json()["pay_rate"] == 35000

        everyone = client.get("/api/v1/staff/all", headers=seed["chef"]).json()
        assert [member["name"] for member in everyone] == ["Mia Manager", "Chris Chef", "Sam Shipper"]

        assert client.delete(f"/api/v1/staff/{seed['manager_id']}", headers=seed["manager"]).status_code == 400
        assert client.delete(f"/api/v1/staff/{sam_id}", headers=seed["manager"]).status_code == 204
        assert client.delete(f"/api/v1/staff/{sam_id}", headers=seed["manager"]).status_code == 404
