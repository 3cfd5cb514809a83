from datetime import datetime, timezone
from pathlib import Path

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from restohub import main as main_module
from restohub.core.config import settings
from restohub.core.security import create_staff_token
from restohub.db import session as db_session
from restohub.db.base import Base
from restohub.main import app
from restohub.models import Customer, Sale, Staff


def _prepare_db(tmp_path: Path, monkeypatch) -> sessionmaker:
    engine = create_engine(f"sqlite:///{tmp_path / 'sales.db'}", connect_args={"check_same_thread": False})
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)
    monkeypatch.setattr(main_module, "engine", engine)
    monkeypatch.setattr(main_module, "SessionLocal", testing_session_local)
    monkeypatch.setattr(settings, "job_sweep_enabled", False)
    monkeypatch.setattr(settings, "media_root", str(tmp_path / "media"))
    return testing_session_local


def _seed(session_local: sessionmaker) -> dict[str, str]:
    def at(day: int, hour: int = 12) -> datetime:
        return datetime(2026, 4, day, hour, tzinfo=timezone.utc)

    with session_local() as db:
        chef = Staff(name="Chris Chef", email="chef@resto.vn", password_hash="x", role="Chef")
        customer = Customer(name="Lan", phone="0901234567", email="lan@example.com", password_hash="x")
        db.add_all([chef, customer])
        db.flush()
        db.add_all(
            [
                Sale(customer_id=customer.id, total_amount=100000, status="Completed", sale_time=at(1), completion_time=at(1, 13)),
                Sale(customer_id=customer.id, total_amount=50000, status="Completed", sale_time=at(1, 18), completion_time=at(1, 19)),
                Sale(customer_id=customer.id, total_amount=70000, status="Completed", sale_time=at(2), completion_time=at(2, 13)),
                Sale(customer_id=customer.id, total_amount=90000, status="Cancel", sale_time=at(2)),
                Sale(customer_id=customer.id, total_amount=30000, status="Confirmed", sale_time=datetime(2026, 5, 1, 9, tzinfo=timezone.utc)),
            ]
        )
        db.commit()
        return {"Authorization": f"Bearer {create_staff_token(chef)}"}


def test_revenue_counts_only_completed_orders(tmp_path: Path, monkeypatch) -> None:
    headers = _seed(_prepare_db(tmp_path, monkeypatch))

    with TestClient(app) as client:
        revenue = client.get("/api/v1/orders/revenue", headers=headers).json()

    assert revenue == [
        {"date_recorded": "2026-04-02", "total_revenue": 70000, "order_count": 1},
        {"date_recorded": "2026-04-01", "total_revenue": 150000, "order_count": 2},
    ]


def test_daily_order_counts(tmp_path: Path, monkeypatch) -> None:
    headers = _seed(_prepare_db(tmp_path, monkeypatch))

    with TestClient(app) as client:
        by_query = client.get("/api/v1/sales", params={"year": 2026, "month": 4}, headers=headers).json()
        by_path = client.get("/api/v1/sales/daily/2026/4", headers=headers).json()
        assert client.get("/api/v1/sales/daily/2026/13", headers=headers).status_code == 422
        assert client.get("/api/v1/sales", params={"year": 2026, "month": 4}).status_code == 401

    assert by_query == by_path
    assert by_query["days"] == [{"day": 1, "count": 2}, {"day": 2, "count": 2}]
