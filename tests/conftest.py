"""Shared fixtures: in-memory SQLite, a TestClient bound to it, and seed rows."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from agencydesk import models, models_it  # noqa: F401
from agencydesk.database import Base, get_db
from agencydesk.main import app
from agencydesk.models import Client, Company, Employee, ItemCategory, User


@pytest.fixture
def engine():
    """Create in-memory SQLite engine shared across connections."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def db(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(engine):
    """TestClient whose requests use the in-memory database."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def company(db):
    company = Company(name="Acme Agency", email="ops@acme.test")
    db.add(company)
    db.commit()
    db.refresh(company)
    return company


@pytest.fixture
def agency_user(db, company):
    user = User(company_id=company.id, first_name="Asha", email="asha@acme.test")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def client_user(db, company):
    user = User(company_id=company.id, first_name="Ravi", email="ravi@client.test")
    db.add(user)
    db.flush()
    client_row = Client(
        user_id=user.id,
        company_id=company.id,
        first_name="Ravi",
        email="ravi@client.test",
        business_email="accounts@client.test",
    )
    db.add(client_row)
    db.commit()
    db.refresh(user)
    db.refresh(client_row)
    return user, client_row


@pytest.fixture
def employee_user(db, company):
    user = User(company_id=company.id, first_name="Meera", email="meera@acme.test")
    db.add(user)
    db.flush()
    employee = Employee(user_id=user.id, company_id=company.id, designation="Designer")
    db.add(employee)
    db.commit()
    db.refresh(user)
    db.refresh(employee)
    return user, employee


@pytest.fixture
def product_category(db, company):
    category = ItemCategory(company_id=company.id, category_name="Laptops", category_type="Product")
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


@pytest.fixture
def service_category(db, company):
    category = ItemCategory(company_id=company.id, category_name="Hosting", category_type="Service")
    db.add(category)
    db.commit()
    db.refresh(category)
    return category
