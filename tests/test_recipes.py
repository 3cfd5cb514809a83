"""Recipe catalogue: menu filters, availability, images and status toggles."""

import json
from pathlib import Path

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker

from restohub import main as main_module
from restohub.core.config import settings
from restohub.core.security import create_staff_token
from restohub.db import session as db_session
from restohub.db.base import Base
from restohub.main import app
from restohub.models import Customer, Ingredient, OrderDetail, Recipe, RecipeIngredient, Sale, Staff


def _prepare_db(tmp_path: Path, monkeypatch) -> sessionmaker:
    engine = create_engine(f"sqlite:///{tmp_path / 'recipes.db'}", connect_args={"check_same_thread": False})
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
        salmon = Ingredient(name="Salmon Fillet", unit="g", quantity=500)
        rice = Ingredient(name="Rice", unit="g", quantity=50)
        tofu = Ingredient(name="Tofu", unit="g", quantity=1000)
        db.add_all([chef, salmon, rice, tofu])
        db.flush()

        salmon_bowl = Recipe(name="Salmon Bowl", category="Bowls", calories=550, price=89000)
        salmon_bowl.ingredients = [
            RecipeIngredient(ingredient_id=salmon.id, weight=150),
            RecipeIngredient(ingredient_id=rice.id, weight=200),
        ]
        tofu_salad = Recipe(name="Tofu Salad", category="Salads", calories=250, price=55000)
        tofu_salad.ingredients = [RecipeIngredient(ingredient_id=tofu.id, weight=120)]
        db.add_all([salmon_bowl, tofu_salad])
        db.commit()
        return {
            "staff": {"Authorization": f"Bearer {create_staff_token(chef)}"},
            "salmon_bowl": salmon_bowl.id,
            "tofu_salad": tofu_salad.id,
            "salmon": salmon.id,
            "rice": rice.id,
            "tofu": tofu.id,
        }


def test_menu_groups_by_category_with_availability(tmp_path: Path, monkeypatch) -> None:
    seed = _seed(_prepare_db(tmp_path, monkeypatch))

    with TestClient(app) as client:
        menu = client.get("/api/v1/recipes").json()
        assert [group["category"] for group in menu] == ["Bowls", "Salads"]
        bowl = menu[0]["recipes"][0]
        assert bowl["name"] == "Salmon Bowl"
        assert bowl["is_available"] is False
        assert menu[1]["recipes"][0]["is_available"] is True

        light = client.get("/api/v1/recipes", params={"calories": "< 300"}).json()
        assert [recipe["name"] for group in light for recipe in group["recipes"]] == ["Tofu Salad"]

        heavy = client.get("/api/v1/recipes", params={"calories": "> 500"}).json()
        assert [recipe["name"] for group in heavy for recipe in group["recipes"]] == ["Salmon Bowl"]

        salmon = client.get("/api/v1/recipes", params={"protein": "Salmon"}).json()
        assert [recipe["id"] for group in salmon for recipe in group["recipes"]] == [seed["salmon_bowl"]]

        assert client.get("/api/v1/recipes", params={"calories": "huge"}).status_code == 400


def test_create_recipe_with_image_and_delete(tmp_path: Path, monkeypatch) -> None:
    seed = _seed(_prepare_db(tmp_path, monkeypatch))

    with TestClient(app) as client:
        created = client.post(
            "/api/v1/recipes",
            data={
                "name": "Tofu Curry",
                "category": "Curries",
                "calories": "420",
                "price": "65000",
                "ingredients": json.dumps([{"ingredient_id": seed["tofu"], "weight": 180}]),
            },
            files={"image": ("curry.JPG", b"\xff\xd8fake-jpeg", "image/jpeg")},
            headers=seed["staff"],
        )
        assert created.status_code == 201, created.text
        recipe = created.json()
        assert recipe["image_url"] == f"/media/recipes/RCP-{recipe['id']:03d}.jpg"
        stored = tmp_path / "media" / "recipes" / f"RCP-{recipe['id']:03d}.jpg"
        assert stored.read_bytes() == b"\xff\xd8fake-jpeg"
        assert recipe["ingredients"][0]["ingredient_name"] == "Tofu"

        bad_ingredients = client.post(
            "/api/v1/recipes",
            data={"name": "Broken", "price": "1000", "ingredients": "not json"},
            headers=seed["staff"],
        )
        assert bad_ingredients.status_code == 400

        deleted = client.delete(f"/api/v1/recipes/{recipe['id']}", headers=seed["staff"])
        assert deleted.status_code == 204
        assert not stored.exists()
        assert client.get(f"/api/v1/recipes/{recipe['id']}").status_code == 404


def test_update_replaces_ingredient_list(tmp_path: Path, monkeypatch) -> None:
    session_local = _prepare_db(tmp_path, monkeypatch)
    seed = _seed(session_local)

    with TestClient(app) as client:
        updated = client.put(
            f"/api/v1/recipes/{seed['salmon_bowl']}",
            json={"price": 95000, "ingredients": [{"ingredient_id": seed["salmon"], "weight": 100}]},
            headers=seed["staff"],
        )
        assert updated.status_code == 200
        body = updated.json()
        assert body["price"] == 95000
        assert [line["ingredient_id"] for line in body["ingredients"]] == [seed["salmon"]]
        assert body["is_available"] is True

        unknown = client.put(
            f"/api/v1/recipes/{seed['salmon_bowl']}",
            json={"ingredients": [{"ingredient_id": 999, "weight": 1}]},
            headers=seed["staff"],
        )
        assert unknown.status_code == 404

    with session_local() as db:
        lines = db.scalars(select(RecipeIngredient).where(RecipeIngredient.recipe_id == seed["salmon_bowl"])).all()
        assert len(lines) == 1


def test_recipe_referenced_by_orders_cannot_be_deleted(tmp_path: Path, monkeypatch) -> None:
    session_local = _prepare_db(tmp_path, monkeypatch)
    seed = _seed(session_local)
    with session_local() as db:
        customer = Customer(name="Lan", phone="0901234567", email="lan@example.com", password_hash="x")
        db.add(customer)
        db.flush()
        db.add(Sale(customer_id=customer.id, total_amount=55000, items=[OrderDetail(recipe_id=seed["tofu_salad"], quantity=1)]))
        db.commit()

    with TestClient(app) as client:
        response = client.delete(f"/api/v1/recipes/{seed['tofu_salad']}", headers=seed["staff"])
        assert response.status_code == 409
        assert client.get(f"/api/v1/recipes/{seed['tofu_salad']}").status_code == 200


def test_status_toggles_require_staff(tmp_path: Path, monkeypatch) -> None:
    seed = _seed(_prepare_db(tmp_path, monkeypatch))

    with TestClient(app) as client:
        assert client.post("/api/v1/recipes/inactive", json={"recipe_id": seed["tofu_salad"]}).status_code == 401

        off = client.post("/api/v1/recipes/inactive", json={"recipe_id": seed["tofu_salad"]}, headers=seed["staff"])
        assert off.json()["status"] == "unavailable"

        on = client.post("/api/v1/recipes/active", json={"recipe_id": seed["tofu_salad"]}, headers=seed["staff"])
        assert on.json()["status"] == "available"

        missing = client.post("/api/v1/recipes/active", json={"recipe_id": 999}, headers=seed["staff"])
        assert missing.status_code == 404
