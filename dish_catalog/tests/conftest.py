import pytest
from fastapi.testclient import TestClient

from dish_catalog.app import create_app
from dish_catalog.catalog.data_store import DishStore
from dish_catalog.config import AppConfig

SAMPLE_DISHES = [
    {
        "id": "0",
        "name": "Jeera rice",
        "ingredients": ["Rice", "Water", "Salt"],
        "diet": "vegetarian",
        "prep_time": 5,
        "cook_time": 20,
        "flavor_profile": "spicy",
        "course": "main course",
        "state": "Punjab",
        "region": "North",
    },
    {
        "id": "1",
        "name": "Gulab jamun",
        "ingredients": ["Milk powder", "Plain flour", "Ghee", "Sugar"],
        "diet": "vegetarian",
        "prep_time": 15,
        "cook_time": 40,
        "flavor_profile": "sweet",
        "course": "dessert",
        "state": "West bengal",
        "region": "East",
    },
    {
        "id": "2",
        "name": "Chicken tikka",
        "ingredients": ["Chicken", "Yogurt", "Ginger", "Garlic", "Salt"],
        "diet": "non-vegetarian",
        "prep_time": 120,
        "cook_time": 30,
        "flavor_profile": "spicy",
        "course": "starter",
        "state": "Punjab",
        "region": "North",
    },
    {
        "id": "3",
        "name": "Kheer",
        "ingredients": ["Milk", "Rice", "Sugar", "Cardamom"],
        "diet": "vegetarian",
        "prep_time": 10,
        "cook_time": 50,
        "flavor_profile": "sweet",
        "course": "dessert",
        "state": None,
        "region": None,
    },
    {
        "id": "4",
        "name": "Boondi",
        "ingredients": ["Gram flour", "Ghee", "Sugar"],
        "diet": "vegetarian",
        "prep_time": None,
        "cook_time": None,
        "flavor_profile": None,
        "course": "snack",
        "state": "Rajasthan",
        "region": "West",
    },
    {
        "id": "5",
        "name": "Mystery plate",
        "ingredients": [],
        "diet": "vegetarian",
        "prep_time": None,
        "cook_time": None,
        "flavor_profile": None,
        "course": "snack",
        "state": None,
        "region": None,
    },
    {
        "id": "6",
        "name": "Aloo gobi",
        "ingredients": ["Potato", "Cauliflower", "Salt", "Turmeric"],
        "diet": "vegetarian",
        "prep_time": 10,
        "cook_time": 25,
        "flavor_profile": "spicy",
        "course": "main course",
        "state": "Punjab",
        "region": "North",
    },
]


@pytest.fixture
def sample_dishes():
    return [dict(d) for d in SAMPLE_DISHES]


@pytest.fixture
def store(sample_dishes):
    return DishStore.from_records(sample_dishes)


@pytest.fixture
def app(store):
    return create_app(config=AppConfig(), store=store)


@pytest.fixture
def client(app):
    return TestClient(app)
