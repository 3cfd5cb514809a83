from datetime import date
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
from restohub.models import Ingredient, Recipe, RecipeIngredient, Staff, Supplier


def _prepare_db(tmp_path: Path, monkeypatch) -> sessionmaker:
    engine = create_engine(f"sqlite:///{tmp_path / 'inventory.db'}", connect_args={"check_same_thread": False})
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
        chef = Staff(name="Chris Chef", email="chef@resto.vn", password_hash="x", role="Chef")
        farm = Supplier(name="Da Lat Farm", phone="0281234567", address="Da Lat")
        fishery = Supplier(name="Nha Trang Fishery")
        db.add_all([chef, farm, fishery])
        db.commit()
        return {
            "staff": {"Authorization": f"Bearer {create_staff_token(chef)}"},
            "farm": farm.id,
            "fishery": fishery.id,
        }


def test_ingredient_crud_and_duplicate_name(tmp_path: Path, monkeypatch) -> None:
    seed = _seed(_prepare_db(tmp_path, monkeypatch))

    with TestClient(app) as client:
        assert client.get("/api/v1/ingredients").status_code == 401

        created = client.post(
            "/api/v1/ingredients",
            json={"ingredient_name": "Tofu", "unit": "g", "quantity": 1000, "minimum_threshold": 200, "supplier_id": seed["farm"]},
            headers=seed["staff"],
        )
        assert created.status_code == 201
        ingredient_id = created.json()["id"]

        duplicate = client.post(
            "/api/v1/ingredients",
            json={"ingredient_name": "Tofu", "unit": "g", "quantity": 5},
            headers=seed["staff"],
        )
        assert duplicate.status_code == 409

        listed = client.get("/api/v1/ingredients", headers=seed["staff"]).json()
        assert listed == [
            {
                "ingredient_id": ingredient_id,
                "ingredient_name": "Tofu",
                "unit": "g",
                "quantity": 1000.0,
                "minimum_threshold": 200.0,
                "good_for": None,
                "supplier_name": "Da Lat Farm",
            }
        ]

        updated = client.put(
            f"/api/v1/ingredients/{ingredient_id}",
            json={"minimum_threshold": 300, "supplier_id": seed["fishery"]},
            headers=seed["staff"],
        )
        assert updated.status_code == 200
        assert updated.json()["minimum_threshold"] == 300
        assert updated.json()["supplier_name"] == "Nha Trang Fishery"

        removed = client.delete(f"/api/v1/ingredients/{ingredient_id}", headers=seed["staff"])
        assert removed.status_code == 204
        assert client.get("/api/v1/ingredients", headers=seed["staff"]).json() == []


def test_referenced_ingredient_cannot_be_deleted(tmp_path: Path, monkeypatch) -> None:
    session_local = _prepare_db(tmp_path, monkeypatch)
    seed = _seed(session_local)
    with session_local() as db:
        tofu = Ingredient(name="Tofu", unit="g", quantity=100)
        db.add(tofu)
        db.flush()
        recipe = Recipe(name="Tofu Salad", price=55000)
        recipe.ingredients = [RecipeIngredient(ingredient_id=tofu.id, weight=120)]
        db.add(recipe)
        db.commit()
        tofu_id = tofu.id

    with TestClient(app) as client:
        response = client.delete(f"/api/v1/ingredients/{tofu_id}", headers=seed["staff"])
        assert response.status_code == 409
        assert "referenced by recipes" in response.json()["detail"]
        assert len(client.get("/api/v1/ingredients", headers=seed["staff"]).json()) == 1


def test_restock_and_waste_adjust_stock(tmp_path: Path, monkeypatch) -> None:
    session_local = _prepare_db(tmp_path, monkeypatch)
    seed = _seed(session_local)
    with session_local() as db:
        salmon = Ingredient(name="Salmon Fillet", unit="g", quantity=100)
        db.add(salmon)
        db.commit()
        salmon_id = salmon.id

    with TestClient(app) as client:
        restock = client.post(
            "/api/v1/restock",
            json={
                "supplier_id": seed["fishery"],
                "restock_date": "2026-03-02",
                "items": [{"ingredient_id": salmon_id, "import_quantity": 400, "import_price": 300}],
            },
            headers=seed["staff"],
        )
        assert restock.status_code == 201
        restock_id = restock.json()["id"]

        client.post(
            "/api/v1/restock",
            json={
                "supplier_id": seed["fishery"],
                "restock_date": "2026-03-02",
                "items": [{"ingredient_id": salmon_id, "import_quantity": 100, "import_price": 250}],
            },
            headers=seed["staff"],
        )

        waste = client.post(
            "/api/v1/ingredients/waste",
            json={"waste_date": "2026-03-03", "items": [{"ingredient_id": salmon_id, "quantity": 50, "reason": "Spoiled"}]},
            headers=seed["staff"],
        )
        assert waste.status_code == 201

        stock = client.get("/api/v1/ingredients", headers=seed["staff"]).json()[0]["quantity"]
        assert stock == 100 + 400 + 100 - 50

        waste_rows = client.get("/api/v1/ingredients/waste", headers=seed["staff"]).json()
        assert waste_rows[0]["ingredient_name"] == "Salmon Fillet"
        assert waste_rows[0]["wasted_quantity"] == 50
        assert waste_rows[0]["reason"] == "Spoiled"

        history = client.get(f"/api/v1/ingredients/{salmon_id}/restocks", headers=seed["staff"]).json()
        assert len(history) == 2
        assert history[0]["unit"] == "g"

        detail = client.get(f"/api/v1/restock/{restock_id}", headers=seed["staff"]).json()
        assert detail["supplier_name"] == "Nha Trang Fishery"
        assert detail["total_import_price"] == 400 * 300

        summary = client.get("/api/v1/restock", headers=seed["staff"]).json()
        assert {row["restock_date"] for row in summary} == {date(2026, 3, 2).isoformat()}

        totals = client.get("/api/v1/restock", params={"month": 3, "year": 2026}, headers=seed["staff"]).json()
        assert totals == [{"day": 2, "total_import_price": 400 * 300 + 100 * 250}]

        unknown_supplier = client.post(
            "/api/v1/restock",
            json={"supplier_id": 999, "items": [{"ingredient_id": salmon_id, "import_quantity": 1, "import_price": 1}]},
            headers=seed["staff"],
        )
        assert unknown_supplier.status_code == 404
        assert client.get("/api/v1/restock/999", headers=seed["staff"]).status_code == 404


def test_suppliers_are_public_to_read(tmp_path: Path, monkeypatch) -> None:
    seed = _seed(_prepare_db(tmp_path, monkeypatch))

    with TestClient(app) as client:
        names = [supplier["name"] for supplier in client.get("/api/v1/suppliers").json()]
        assert names == ["Da Lat Farm", "Nha Trang Fishery"]

        assert client.post("/api/v1/suppliers", json={"name": "Mekong Greens"}).status_code == 401
        created = client.post("/api/v1/suppliers", json={"name": "Mekong Greens"}, headers=seed["staff"])
        assert created.status_code == 201
        assert created.json()["name"] == "Mekong Greens"
