import uuid

import pytest

from fakes import FakeRedis


@pytest.fixture
def fake_redis():
    from extensions.redis_client import set_redis

    client = FakeRedis()
    set_redis(client)
    yield client
    set_redis(None)


@pytest.fixture
def app(fake_redis):
    """内存 SQLite + fake Redis 的测试应用，每个用例一份全新数据库。"""
    from app import create_app
    from extensions.database import db

    app = create_app("testing")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


DEFAULT_PASSWORD = "Passw0rdX"


@pytest.fixture
def make_user(app):
    """直接写库创建用户，返回 User。"""
    from repositories.user_repository import UserRepository
    from utils.password import hash_password

    def _make(username=None, password=DEFAULT_PASSWORD, is_active=True, **kwargs):
        suffix = uuid.uuid4().hex[:8]
        username = username or f"user_{suffix}"
        user = UserRepository.create(
            email=kwargs.get("email", f"{username}@example.com"),
            username=username,
            password_hash=hash_password(password),
            first_name=kwargs.get("first_name", "Test"),
            last_name=kwargs.get("last_name", username.title()),
            role=kwargs.get("role", "member"),
        )
        user.is_active = is_active
        UserRepository.commit()
        return user

    return _make


@pytest.fixture
def auth_headers(app):
    from services.token_service import TokenService

    def _headers(user):
        tokens = TokenService.issue(user.id)
        return {"Authorization": f"Bearer {tokens['accessToken']}"}

    return _headers


@pytest.fixture
def make_project(app):
    from services.project_service import ProjectService

    def _make(owner, name="Apollo", description="Moon landing", **kwargs):
        return ProjectService.create(owner.id, name, description, **kwargs)

    return _make


@pytest.fixture
def add_member(app):
    from services.project_service import ProjectService

    def _add(project, user, role="member"):
        return ProjectService.add_member(project.owner_id, project.id, user.id, role=role)

    return _add
