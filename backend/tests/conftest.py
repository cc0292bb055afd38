"""
Pytest configuration and fixtures for backend tests.
"""

import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Set test environment variables before importing config
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["CORS_ORIGINS"] = '["http://localhost:3000"]'
os.environ["ENVIRONMENT"] = "test"
os.environ["AUTO_CREATE_DB"] = "false"
os.environ["NTFY_ENABLED"] = "false"
os.environ.pop("SENTRY_DSN", None)

from authentication.auth import create_user_token, get_password_hash  # noqa: E402
from repositories.database import Base, enable_sqlite_foreign_keys, get_db  # noqa: E402
import repositories.db_models as db_models  # noqa: E402

# Test database engine (in-memory SQLite)
TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(engine)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "testpassword123"


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh in-memory database session for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with overridden database dependency."""
    from main import app
    from helpers.rate_limiter import limiter

    # Reset rate limiter storage before each test to prevent rate limit errors
    limiter.reset()

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _create_user(db_session, username: str, **kwargs) -> db_models.User:
    user = db_models.User(
        username=username,
        nickname=kwargs.pop("nickname", f"{username}_nick"),
        hashed_password=get_password_hash(TEST_PASSWORD),
        **kwargs,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def _headers(user: db_models.User) -> dict:
    return {"Authorization": f"Bearer {create_user_token(user)}"}


# =============================================================================
# Users, one per tier
# =============================================================================


@pytest.fixture
def test_user(db_session) -> db_models.User:
    """Create a general member."""
    return _create_user(db_session, "testuser", email="test@example.com")


@pytest.fixture
def other_user(db_session) -> db_models.User:
    """Create a second general member."""
    return _create_user(db_session, "otheruser", email="other@example.com")


@pytest.fixture
def test_company(db_session) -> db_models.Company:
    company = db_models.Company(
        name="Acme Corp", slug="acme", email_domain="acme.com", is_verified=True
    )
    db_session.add(company)
    db_session.commit()
    db_session.refresh(company)
    return company


@pytest.fixture
def company_user(db_session, test_company) -> db_models.User:
    """Create a company-verified member of Acme."""
    return _create_user(
        db_session,
        "acmeuser",
        email="user@acme.com",
        company_verified=True,
        company_id=test_company.id,
    )


@pytest.fixture
def admin_user(db_session) -> db_models.User:
    """Create an admin."""
    return _create_user(
        db_session,
        "adminuser",
        email="admin@example.com",
        role=db_models.UserRole.ADMIN,
    )


@pytest.fixture
def suspended_user(db_session) -> db_models.User:
    return _create_user(
        db_session,
        "suspended",
        email="suspended@example.com",
        status=db_models.UserStatus.SUSPENDED,
    )


@pytest.fixture
def auth_headers(test_user) -> dict:
    """Get authentication headers for test user."""
    return _headers(test_user)


@pytest.fixture
def other_headers(other_user) -> dict:
    return _headers(other_user)


@pytest.fixture
def company_headers(company_user) -> dict:
    return _headers(company_user)


@pytest.fixture
def admin_headers(admin_user) -> dict:
    """Get authentication headers for admin user."""
    return _headers(admin_user)


@pytest.fixture
def suspended_headers(suspended_user) -> dict:
    return _headers(suspended_user)


# =============================================================================
# Communities and content
# =============================================================================


@pytest.fixture
def test_community(db_session) -> db_models.Community:
    community = db_models.Community(
        name="Free Talk",
        slug="free-talk",
        type=db_models.CommunityType.GENERAL,
    )
    db_session.add(community)
    db_session.commit()
    db_session.refresh(community)
    return community


@pytest.fixture
def test_post(db_session, test_community, other_user) -> db_models.Post:
    """Create an active post written by other_user."""
    post = db_models.Post(
        community_id=test_community.id,
        author_id=other_user.id,
        title="Weekly thread",
        content="Anything goes in this weekly thread.",
    )
    db_session.add(post)
    db_session.commit()
    db_session.refresh(post)
    return post


@pytest.fixture
def test_comment(db_session, test_post, other_user) -> db_models.Comment:
    """Create an active comment written by other_user."""
    comment = db_models.Comment(
        post_id=test_post.id,
        author_id=other_user.id,
        content="First!",
    )
    db_session.add(comment)
    db_session.commit()
    db_session.refresh(comment)
    return comment


@pytest.fixture
def public_servant_category(db_session) -> db_models.PublicServantCategory:
    category = db_models.PublicServantCategory(name="Firefighters", slug="firefighters")
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category


@pytest.fixture
def interest_category(db_session) -> db_models.InterestCategory:
    category = db_models.InterestCategory(name="Investing", slug="investing")
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category
