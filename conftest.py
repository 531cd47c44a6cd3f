import os

import pytest

# Importing tutor_api.main builds the module-level app from the environment
os.environ.setdefault('DATABASE_URL', 'sqlite://')
os.environ.setdefault('BCRYPT_ROUNDS', '4')

from fastapi.testclient import TestClient  # noqa: E402

from tutor_api.auth.passwords import PasswordHasher  # noqa: E402
from tutor_api.core.config import Settings  # noqa: E402
from tutor_api.database import build_engine, build_session_factory, init_schema  # noqa: E402
from tutor_api.main import create_app  # noqa: E402
from tutor_api.models.account import Account, Role  # noqa: E402
from tutor_api.models.tutor_profile import TutorProfile  # noqa: E402

TEST_PASSWORD = 'correct-horse-battery'
TEST_BIO = 'Experienced mathematics tutor who loves helping students master algebra and calculus.'


@pytest.fixture
def settings() -> Settings:
    return Settings(
        app_env='test',
        database_url='sqlite://',
        jwt_secret_key='test-secret',
        bcrypt_rounds=4,
    )


@pytest.fixture
def hasher(settings: Settings) -> PasswordHasher:
    return PasswordHasher(rounds=settings.bcrypt_rounds)


@pytest.fixture
def db(settings: Settings):
    engine = build_engine(settings.database_url)
    init_schema(engine)
    session = build_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def make_account(db, hasher):
    counter = {'value': 0}

    def factory(role: Role = Role.STUDENT, email: str | None = None, first_name: str = 'Test', **overrides) -> Account:
        counter['value'] += 1
        account = Account(
            email=email or f'user{counter["value"]}@example.com',
            password_hash=hasher.hash(TEST_PASSWORD),
            first_name=first_name,
            last_name='User',
            role=role,
            **overrides,
        )
        db.add(account)
        db.commit()
        db.refresh(account)
        return account

    return factory


@pytest.fixture
def make_tutor(db, make_account):
    def factory(account: Account | None = None, **overrides) -> TutorProfile:
        account = account or make_account(role=Role.TUTOR)
        fields = {
            'bio': TEST_BIO,
            'specializations': ['algebra', 'calculus'],
            'hourly_rate': 4500,
            'years_experience': 6,
        }
        fields.update(overrides)
        profile = TutorProfile(account_id=account.id, **fields)
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return profile

    return factory


@pytest.fixture
def client(settings: Settings):
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client
