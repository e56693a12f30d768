"""
Pytest configuration and fixtures for the POS backend.

The app runs against a shared in-memory SQLite database; every test gets
fresh tables.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["APP_ENV"] = "test"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from zexpos import models
from zexpos.core.security import create_access_token, get_password_hash
from zexpos.db.base import Base
from zexpos.db.session import engine, SessionLocal
from zexpos.main import app


PASSWORD = "password123"
_PASSWORD_HASH = get_password_hash(PASSWORD)


def auth_headers(user):
    token = create_access_token(subject=str(user.id), role=user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def organization(db):
    org = models.Organization(name="Harbor Group", contact_email="owner@harbor.com")
    db.add(org)
    db.commit()
    return org


@pytest.fixture
def restaurant(db, organization):
    restaurant = models.Restaurant(organization_id=organization.id, name="Harbor Grill", address="12 Pier Road", phone="555-0101")
    db.add(restaurant)
    db.commit()
    return restaurant


@pytest.fixture
def other_restaurant(db):
    """a restaurant in a different organization"""
    org = models.Organization(name="Rival Foods")
    db.add(org)
    db.flush()
    restaurant = models.Restaurant(organization_id=org.id, name="Rival Diner", address="9 Elm Street")
    db.add(restaurant)
    db.commit()
    return restaurant


@pytest.fixture
def make_staff(db):
    def factory(role, restaurant=None, organization_id=None, email=None, is_active=True):
        member = models.Staff(
            email=email or f"{role}-{restaurant.id if restaurant else 'x'}@harbor.com",
            password_hash=_PASSWORD_HASH,
            full_name=f"Test {role.title()}",
            role=role,
            organization_id=organization_id if organization_id is not None else (restaurant.organization_id if restaurant else None),
            restaurant_id=restaurant.id if restaurant and role not in ("super_admin", "org_admin") else None,
            is_active=is_active,
        )
        db.add(member)
        db.commit()
        return member
    return factory


@pytest.fixture
def super_admin(make_staff):
    return make_staff("super_admin", email="root@harbor.com")


@pytest.fixture
def org_admin(make_staff, restaurant):
    return make_staff("org_admin", restaurant=restaurant)


@pytest.fixture
def manager(make_staff, restaurant):
    return make_staff("manager", restaurant=restaurant)


@pytest.fixture
def server(make_staff, restaurant):
    return make_staff("server", restaurant=restaurant)


@pytest.fixture
def kitchen(make_staff, restaurant):
    return make_staff("kitchen", restaurant=restaurant)


@pytest.fixture
def category(db, restaurant):
    category = models.MenuCategory(restaurant_id=restaurant.id, name="Mains")
    db.add(category)
    db.commit()
    return category


@pytest.fixture
def menu_items(db, restaurant, category):
    """burger 12.50, fries 4.00, soda 2.25 and an unavailable special"""
    items = {
        "burger": models.MenuItem(restaurant_id=restaurant.id, category_id=category.id, name="Burger", price=Decimal("12.50")),
        "fries": models.MenuItem(restaurant_id=restaurant.id, category_id=category.id, name="Fries", price=Decimal("4.00")),
        "soda": models.MenuItem(restaurant_id=restaurant.id, name="Soda", price=Decimal("2.25")),
        "special": models.MenuItem(restaurant_id=restaurant.id, name="Chef Special", price=Decimal("30.00"), is_available=False),
    }
    db.add_all(items.values())
    db.commit()
    return items


@pytest.fixture
def table(db, restaurant):
    table = models.RestaurantTable(restaurant_id=restaurant.id, table_number=5, table_name="Window", seats=4)
    db.add(table)
    db.commit()
    return table


@pytest.fixture
def create_order(client, server, restaurant, menu_items):
    """place an order through the API and return its json"""
    def factory(items=None, user=None, **extra):
        payload = {
            "restaurant_id": restaurant.id,
            "items": items or [
                {"menu_item_id": menu_items["burger"].id, "quantity": 2},
                {"menu_item_id": menu_items["fries"].id, "quantity": 1},
            ],
        }
        payload.update(extra)
        response = client.post("/api/v1/orders", json=payload, headers=auth_headers(user or server))
        assert response.status_code == 201, response.text
        return response.json()
    return factory
