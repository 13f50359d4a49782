"""
PDC Pro - Test Configuration and Fixtures
"""
import os
from typing import AsyncGenerator, List, Tuple

import pytest
from faker import Faker
from httpx import AsyncClient, ASGITransport
from mongomock_motor import AsyncMongoMockClient

# Set testing environment
os.environ['DATABASE_URL'] = 'mongodb://localhost:27017/pdc_pro_test'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['IMAGE_HOST_ADAPTER_TYPE'] = 'mock'

from pdc_pro.main import app
from pdc_pro.adapters.image_host_adapter_interface import ImageHostAdapterInterface
from pdc_pro.core.database import init_db
from pdc_pro.core.dependencies import get_image_uploader
from pdc_pro.core.exceptions import ImageUploadError
from pdc_pro.core.security import create_access_token
from pdc_pro.models.user import User
from pdc_pro.repositories.user_repository import UserRepository

fake = Faker()

TEST_PASSWORD = 'testpassword123'


def fake_email() -> str:
    return f"{fake.unique.user_name()}@pdcpro.io"


class RecordingUploader(ImageHostAdapterInterface):
    """Image host stand-in that records calls and can be told to fail"""

    def __init__(self):
        self.calls: List[Tuple[bytes, str, str]] = []
        self.fail = False

    async def upload(self, image_bytes: bytes, content_type: str, filename: str = "image") -> str:
        self.calls.append((image_bytes, content_type, filename))
        if self.fail:
            raise ImageUploadError("host down", status_code=503)
        return f"https://res.cloudinary.com/demo/image/upload/pdi-pro-inspections/{len(self.calls)}.jpg"


@pytest.fixture
async def db():
    """Fresh in-memory database bound to Beanie for each test"""
    database = AsyncMongoMockClient()['pdc_pro_test']
    await init_db(database)
    yield database


@pytest.fixture
def uploader() -> RecordingUploader:
    return RecordingUploader()


@pytest.fixture
async def client(db, uploader) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with the image host overridden"""
    app.dependency_overrides[get_image_uploader] = lambda: uploader

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def test_user(db) -> User:
    """Create a test user"""
    return await UserRepository().register(fake.name(), fake_email(), TEST_PASSWORD)


@pytest.fixture
async def other_user(db) -> User:
    """A second inspector, for ownership checks"""
    return await UserRepository().register(fake.name(), fake_email(), TEST_PASSWORD)


def headers_for(user: User) -> dict:
    token = create_access_token({'sub': str(user.id)})
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def auth_headers(test_user: User) -> dict:
    """Generate authentication headers for test user"""
    return headers_for(test_user)


@pytest.fixture
def other_headers(other_user: User) -> dict:
    return headers_for(other_user)
