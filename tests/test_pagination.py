import pytest
from fastapi.testclient import TestClient

from app import crud, schemas
from app.crud import normalize_page


def make_recipe(name):
    return schemas.RecipeCreate(
        recipe_name=name,
        steps=[{"step_number": 1, "step_instructions": "Put everything in a bowl."}],
    )


@pytest.fixture
def fifteen_recipes(db):
    for i in range(15):
        crud.create_recipe(db, make_recipe(f"Recipe number {i:02d}"))


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, 10),
        ("", 10),
        ("x", 10),
        ("0", 10),
        (0, 10),
        ("-4", 1),
        (-4, 1),
        ("3", 3),
        ("3abc", 3),
        ("2.7", 2),
        (" 7", 7),
        (5, 5),
    ],
)
def test_normalize_page(value, expected):
    assert normalize_page(value, 10) == expected


def test_second_page_of_fifteen(db, fifteen_recipes):
    result = crud.get_recipes(db, page=2, page_size=5)

    assert len(result["recipes"]) == 5
    assert result["total"] == 15
    assert result["page"] == 2
    assert result["page_size"] == 5


def test_pages_do_not_overlap(db, fifteen_recipes):
    ids = []
    for page in (1, 2, 3):
        ids.extend(r.recipe_id for r in crud.get_recipes(db, page=page, page_size=5)["recipes"])

    assert len(ids) == 15
    assert len(set(ids)) == 15


def test_page_zero_behaves_like_page_one(db, fifteen_recipes):
    first = crud.get_recipes(db, page=0, page_size=10)
    one = crud.get_recipes(db, page=1, page_size=10)

    assert first["page"] == 1
    assert [r.recipe_id for r in first["recipes"]] == [r.recipe_id for r in one["recipes"]]


def test_invalid_values_fall_back_to_defaults(db, fifteen_recipes):
    result = crud.get_recipes(db, page="x", page_size="y")

    assert result["page"] == 1
    assert result["page_size"] == 10
    assert len(result["recipes"]) == 10


def test_page_size_is_capped(db, fifteen_recipes):
    result = crud.get_recipes(db, page=1, page_size=100000)

    assert result["page_size"] == 100
    assert len(result["recipes"]) == 15


def test_page_past_the_end_is_empty(db, fifteen_recipes):
    result = crud.get_recipes(db, page=4, page_size=5)

    assert result["recipes"] == []
    assert result["total"] == 15


def test_list_endpoint(client: TestClient, db, fifteen_recipes):
    response = client.get("/recipes", params={"page": 2, "pageSize": 5})

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 15
    assert data["page"] == 2
    assert data["pageSize"] == 5
    assert len(data["recipes"]) == 5
    assert response.headers["X-Total-Count"] == "15"

    # List view is flat
    assert set(data["recipes"][0].keys()) == {"recipe_id", "recipe_name", "created_at"}


def test_list_endpoint_defaults(client: TestClient, db, fifteen_recipes):
    response = client.get("/recipes", params={"page": "abc", "pageSize": "-2"})

    assert response.status_code == 200
    data = response.json()
    assert data["page"] == 1
    assert data["pageSize"] == 1
    assert len(data["recipes"]) == 1


def test_list_endpoint_empty(client: TestClient, db):
    response = client.get("/recipes")

    assert response.status_code == 200
    assert response.json() == {"recipes": [], "total": 0, "page": 1, "pageSize": 10}


def test_page_beyond_addressable_offset_is_empty(db, fifteen_recipes):
    result = crud.get_recipes(db, page="99999999999999999999", page_size="10")

    assert result["recipes"] == []
    assert result["total"] == 15
    assert result["page"] == 99999999999999999999


def test_list_endpoint_huge_page(client: TestClient, db, fifteen_recipes):
    response = client.get("/recipes", params={"page": "99999999999999999999"})

    assert response.status_code == 200
    data = response.json()
    assert data["recipes"] == []
    assert data["total"] == 15
