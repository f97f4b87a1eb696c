"""
Shared test fixtures
SQLite test database, dependency override and one user per role
"""

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from expense_manager.main import app
from expense_manager.config.database import Base, get_db
from expense_manager.models.lifecycle import UserRole
from expense_manager.models.user import User
from expense_manager.utils.security import get_password_hash

# Test database
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "testpass123"

TEST_USERS = [
    ("employee", "John Smith", "john.smith@company.com", UserRole.EMPLOYEE),
    ("other_employee", "Jane Doe", "jane.doe@company.com", UserRole.EMPLOYEE),
    ("manager", "Robert Taylor", "robert.taylor@company.com", UserRole.MANAGER),
    ("finance", "David Brown", "david.brown@company.com", UserRole.FINANCE),
]


def override_get_db():
    """Override database dependency for testing"""
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(scope="function")
def test_db():
    """Create test database"""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(test_db):
    return TestClient(app)


@pytest.fixture
def db_session(test_db):
    """Session on the test database for direct model checks"""
    db = TestingSessionLocal()
    yield db
    db.close()


@pytest.fixture
def test_password():
    return TEST_PASSWORD


@pytest.fixture
def users(test_db):
    """Create one user per role (plus a second employee); returns ids by key"""
    db = TestingSessionLocal()
    created = {}
    for key, full_name, email, role in TEST_USERS:
        user = User(
            full_name=full_name,
            email=email,
            hashed_password=get_password_hash(TEST_PASSWORD),
            role=role,
            is_active=True
        )
        db.add(user)
        created[key] = user
    db.commit()

    ids = {key: user.id for key, user in created.items()}
    db.close()
    return ids


def dev_headers(user_id: int, role: UserRole):
    return {"X-Dev-User-Id": str(user_id), "X-Dev-User-Role": role.value}


@pytest.fixture
def employee_headers(users):
    return dev_headers(users["employee"], UserRole.EMPLOYEE)


@pytest.fixture
def other_employee_headers(users):
    return dev_headers(users["other_employee"], UserRole.EMPLOYEE)


@pytest.fixture
def manager_headers(users):
    return dev_headers(users["manager"], UserRole.MANAGER)


@pytest.fixture
def finance_headers(users):
    return dev_headers(users["finance"], UserRole.FINANCE)


@pytest.fixture
def create_expense(client, employee_headers):
    """Submit an expense as the employee and return the response body"""
    def _create(title="Lunch", amount=42.50, headers=None, **extra):
        response = client.post(
            "/api/expenses",
            json={"title": title, "amount": amount, **extra},
            headers=headers or employee_headers
        )
        assert response.status_code == 201, response.json()
        return response.json()

    return _create
