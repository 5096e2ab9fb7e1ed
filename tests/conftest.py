"""
Test configuration and fixtures.

Provides:
- In-memory SQLite session shared by the app and the test body
- Onboarded users in each role (reporter, claimant, bystander, admin)
- JWT bearer headers for authenticated requests
- FastAPI TestClient wired to the test session
"""
from typing import Dict, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from registry.config import ADMIN_EMAIL, INSTITUTION_DOMAIN
from registry.db.db import create_db_and_tables, enable_sqlite_foreign_keys, get_session
from registry.main import app
from registry.models.item import Item, ItemType
from registry.models.user import User
from registry.schemas.items_schemas import ItemCreateSchema
from registry.services import lifecycle
from registry.services.identity import registration_number_for_email, user_id_for_email
from registry.utils.auth_helper import create_access_token


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def db(engine) -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


# =============================================================================
# User Fixtures
# =============================================================================

def make_user(db: Session, email: str, name: str, onboarded: bool = True) -> User:
    user = User(
        id=user_id_for_email(email),
        email=email.lower(),
        name=name,
        registration_number=registration_number_for_email(email),
        onboarded=onboarded,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def reporter(db: Session) -> User:
    return make_user(db, f"120000001@{INSTITUTION_DOMAIN}", "Vishnu")


@pytest.fixture
def claimant(db: Session) -> User:
    return make_user(db, f"120000002@{INSTITUTION_DOMAIN}", "Priya Dharshini")


@pytest.fixture
def bystander(db: Session) -> User:
    return make_user(db, f"120000003@{INSTITUTION_DOMAIN}", "Suresh Kumar")


@pytest.fixture
def admin(db: Session) -> User:
    return make_user(db, ADMIN_EMAIL, "System Admin")


def auth_headers(user: User) -> Dict[str, str]:
    token, _ = create_access_token(user)
    return {"Authorization": f"Bearer {token}"}


# =============================================================================
# Item Fixtures
# =============================================================================

def make_item(db: Session, reporter: User, item_type: ItemType = ItemType.found, **fields) -> Item:
    draft = ItemCreateSchema(
        type=item_type,
        title=fields.pop("title", "black samsung smartphone"),
        category=fields.pop("category", "Electronics"),
        description=fields.pop("description", "Found near ASK 2, switched off."),
        location=fields.pop("location", "ASK 2"),
        image_paths=fields.pop("image_paths", ["uploads/phone.jpg"]),
    )
    return lifecycle.create_item(db, draft, reporter)


@pytest.fixture
def found_item(db: Session, reporter: User) -> Item:
    return make_item(db, reporter)


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """
    TestClient sharing the test session. Lifespan is not run, tables are
    created by the engine fixture.
    """
    def override_get_session():
        yield db

    app.dependency_overrides[get_session] = override_get_session

    yield TestClient(app)

    app.dependency_overrides.clear()
