import pytest


@pytest.fixture
def listings() -> list[dict]:
    return [
        {"id": 1, "title": "Red Bicycle", "description": "Barely used, 21 gears", "category": "Sports", "price": 120},
        {"id": 2, "title": "Bicycle", "description": "Kids bike with training wheels", "category": "Sports"},
        {"id": 3, "title": "Bike", "description": "Old frame", "category": "Sports"},
        {"id": 4, "title": "Oak Desk", "description": "Solid wood", "category": "Furniture"},
        {"id": 5, "title": "Standing Lamp", "description": None, "category": "Lighting"},
    ]
