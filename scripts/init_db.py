#!/usr/bin/env python3
"""
Database initialization script for the ZEX-POS backend.

This script handles:
- Database creation (for PostgreSQL)
- Running Alembic migrations
- Creating the first super admin from INITIAL_SUPER_ADMIN_* env vars
- Optional demo data seeding

Usage:
    python scripts/init_db.py [--seed-data] [--check-only]
"""

import os
import sys
import argparse
import subprocess
from decimal import Decimal
from pathlib import Path
from urllib.parse import urlparse

# add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from zexpos.core.config import settings
from zexpos.db.session import engine, session_scope
from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
import logging

# configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def create_database_if_not_exists():
    """create db if it doesn't exist (PostgreSQL only)."""
    database_url = settings.DATABASE_URL

    if not database_url.startswith("postgresql"):
        logger.info("Database URL is not PostgreSQL, skipping database creation")
        return True

    try:
        parsed = urlparse(database_url)
        database_name = parsed.path[1:]  # remove leading '/'

        # connect to the maintenance db on the same server
        postgres_url = f"{parsed.scheme}://{parsed.netloc}/postgres"
        postgres_engine = create_engine(postgres_url, isolation_level="AUTOCOMMIT")

        with postgres_engine.connect() as conn:
            result = conn.execute(
                text("SELECT 1 FROM pg_database WHERE datname = :db_name"),
                {"db_name": database_name}
            )
            if result.fetchone() is None:
                logger.info(f"Creating database: {database_name}")
                conn.execute(text(f'CREATE DATABASE "{database_name}"'))
                logger.info(f"Database {database_name} created successfully")
            else:
                logger.info(f"Database {database_name} already exists")

        postgres_engine.dispose()
        return True

    except SQLAlchemyError as e:
        logger.error(f"Error creating database: {e}")
        return False


def run_migrations():
    """run Alembic migrations to create/update schema."""
    try:
        logger.info("Running Alembic migrations...")
        os.chdir(project_root)

        result = subprocess.run(
            [sys.executable, "-m", "alembic", "upgrade", "head"],
            capture_output=True,
            text=True,
            check=True
        )

        logger.info("Migrations completed successfully")
        logger.debug(f"Migration output: {result.stdout}")
        return True

    except subprocess.CalledProcessError as e:
        logger.error(f"Error running migrations: {e}")
        logger.error(f"Migration error output: {e.stderr}")
        return False


def ensure_super_admin():
    """create the first super admin from env vars when none exists."""
    from zexpos.api.v1.routers.setup import create_super_admin, super_admin_exists

    email = settings.INITIAL_SUPER_ADMIN_EMAIL
    password = settings.INITIAL_SUPER_ADMIN_PASSWORD
    if not email or not password:
        logger.info("INITIAL_SUPER_ADMIN_EMAIL/PASSWORD not set, skipping super admin creation")
        return True

    with session_scope() as db:
        if super_admin_exists(db):
            logger.info("Super admin already exists")
            return True
        try:
            create_super_admin(db, email, password, settings.INITIAL_SUPER_ADMIN_NAME)
        except ValueError as e:
            logger.error(f"Cannot create super admin: {e}")
            return False
    return True


def seed_demo_data():
    """one organization with a restaurant, a small menu, tables and floor staff."""
    from zexpos import models
    from zexpos.core.security import get_password_hash

    logger.info("Seeding demo data...")
    try:
        with session_scope() as db:
            if db.query(models.Organization).filter(models.Organization.name == "Demo Group").first():
                logger.info("Demo data already present, skipping")
                return True

            organization = models.Organization(
                name="Demo Group",
                contact_email="owner@demo-group.com",
                subscription_plan="basic",
            )
            db.add(organization)
            db.flush()

            restaurant = models.Restaurant(
                organization_id=organization.id,
                name="Demo Bistro",
                address="1 Main Street",
                phone="+1 555 0100",
                currency=settings.DEFAULT_CURRENCY,
                tax_rate=settings.TAX_RATE,
            )
            db.add(restaurant)
            db.flush()

            menu = {
                "Starters": [("Garlic Bread", "4.50"), ("Tomato Soup", "6.00")],
                "Mains": [("Margherita Pizza", "12.00"), ("Beef Burger", "14.50"), ("Caesar Salad", "10.00")],
                "Drinks": [("Lemonade", "3.50"), ("Espresso", "2.80")],
            }
            for sort_order, (category_name, items) in enumerate(menu.items()):
                category = models.MenuCategory(restaurant_id=restaurant.id, name=category_name, sort_order=sort_order)
                db.add(category)
                db.flush()
                for item_sort, (item_name, price) in enumerate(items):
                    db.add(models.MenuItem(
                        restaurant_id=restaurant.id,
                        category_id=category.id,
                        name=item_name,
                        price=Decimal(price),
                        sort_order=item_sort,
                    ))
                logger.info(f"Created category {category_name} with {len(items)} items")

            for number in range(1, 9):
                db.add(models.RestaurantTable(restaurant_id=restaurant.id, table_number=number, seats=4 if number <= 6 else 6))
            logger.info("Created 8 tables")

            demo_password = get_password_hash("demo-password")
            for role in ("org_admin", "manager", "server", "kitchen", "cashier"):
                db.add(models.Staff(
                    organization_id=organization.id,
                    restaurant_id=None if role == "org_admin" else restaurant.id,
                    email=f"{role.replace('_', '-')}@demo-group.com",
                    password_hash=demo_password,
                    full_name=f"Demo {role.replace('_', ' ').title()}",
                    role=role,
                ))
            logger.info("Created demo staff (password: demo-password)")

        logger.info("Demo data seeded successfully")
        return True

    except SQLAlchemyError as e:
        logger.error(f"Error seeding demo data: {e}")
        return False


def check_database_connection():
    """check if db connection is working."""
    try:
        logger.info("Testing database connection...")
        with engine.connect() as conn:
            conn.execute(text("SELECT 1")).fetchone()
        logger.info("Database connection successful")
        return True

    except SQLAlchemyError as e:
        logger.error(f"Database connection failed: {e}")
        return False


def main():
    parser = argparse.ArgumentParser(description="Initialize ZEX-POS database")
    parser.add_argument(
        "--seed-data",
        action="store_true",
        help="Seed demo data (organization, restaurant, menu, tables, staff)"
    )
    parser.add_argument(
        "--check-only",
        action="store_true",
        help="Only check database connection, don't run migrations"
    )

    args = parser.parse_args()

    logger.info("Starting database initialization...")

    # step 1: create db if needed
    if args.check_only and not settings.DATABASE_URL.startswith("postgresql"):
        logger.info("Skipping database creation for non-PostgreSQL database in check-only mode")
    elif not create_database_if_not_exists():
        logger.error("Failed to create database")
        return False

    # step 2: check db connection
    if not check_database_connection():
        logger.error("Database connection failed")
        return False

    if args.check_only:
        logger.info("Database check completed successfully")
        return True

    # step 3: run migrations
    if not run_migrations():
        logger.error("Migration failed")
        return False

    # step 4: first super admin
    if not ensure_super_admin():
        logger.error("Super admin creation failed")
        return False

    # step 5: demo data if requested
    if args.seed_data and not seed_demo_data():
        logger.error("Data seeding failed")
        return False

    logger.info("Database initialization completed successfully!")
    return True


if __name__ == "__main__":
    success = main()
    sys.exit(0 if success else 1)
