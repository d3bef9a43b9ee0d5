"""
AudioStudio Testing Configuration
Pytest fixtures and test setup
"""
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from audiostudio.core.config import AudioStudioSettings
from audiostudio.database.connection import DatabaseManager
from audiostudio.main import create_app
from audiostudio.services.job_dispatcher import JobDispatcher
from audiostudio.storage.database import DatabaseStorage
from audiostudio.storage.memory import MemoryStorage


async def create_users(store):
    """Users 1 and 2 own the projects the tests create"""
    await store.create_user({"username": "alice", "password": "pw"})
    await store.create_user({"username": "bob", "password": "pw"})


@pytest.fixture
def test_settings(tmp_path):
    """Settings isolated in a temp directory: no database, no delays, no demo data"""
    return AudioStudioSettings(
        DEBUG=True,
        USE_DATABASE=False,
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'studio.db'}",
        SEED_DEMO_DATA=False,
        UPLOADS_PATH=str(tmp_path / "uploads"),
        OUTPUT_PATH=str(tmp_path / "output"),
        LOG_FILE_PATH=str(tmp_path / "logs" / "audiostudio.log"),
        STEM_SEPARATION_DELAY_SECONDS=0,
        VOICE_CLONING_DELAY_SECONDS=0,
        MUSIC_GENERATION_DELAY_SECONDS=0,
        PLACEHOLDER_DURATION_SECONDS=0.05,
        PLACEHOLDER_SAMPLE_RATE=8000,
        ANTHROPIC_API_KEY=None,
        OPENAI_API_KEY=None,
    )


@pytest_asyncio.fixture
async def memory_storage():
    storage = MemoryStorage()
    await storage.initialize(seed_demo_data=False)
    await create_users(storage)
    yield storage
    await storage.close()


@pytest_asyncio.fixture
async def database_storage(test_settings):
    """Database store on a throwaway SQLite file"""
    database = DatabaseManager(test_settings)
    await database.initialize()
    storage = DatabaseStorage(database)
    await storage.initialize(seed_demo_data=False)
    await create_users(storage)
    yield storage
    await storage.close()


@pytest_asyncio.fixture(params=["memory", "database"])
async def storage(request, test_settings):
    """Runs a test once per backend"""
    if request.param == "memory":
        store = MemoryStorage()
    else:
        database = DatabaseManager(test_settings)
        await database.initialize()
        store = DatabaseStorage(database)
    await store.initialize(seed_demo_data=False)
    await create_users(store)
    yield store
    await store.close()


@pytest_asyncio.fixture
async def dispatcher(memory_storage, test_settings):
    dispatcher = JobDispatcher(memory_storage, test_settings)
    yield dispatcher
    await dispatcher.close()


@pytest_asyncio.fixture
async def project(memory_storage):
    return await memory_storage.create_project({"name": "Test Project", "user_id": 1})


@pytest.fixture
def app(test_settings, memory_storage):
    return create_app(settings=test_settings, storage=memory_storage)


@pytest_asyncio.fixture
async def api_client(app):
    """HTTP client talking to the app in-process"""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    await app.state.dispatcher.close()


@pytest.fixture
def wav_bytes():
    """A tiny valid WAV file"""
    import io

    import numpy as np
    import soundfile as sf

    buffer = io.BytesIO()
    sf.write(buffer, np.zeros(800, dtype=np.float32), 8000, format="WAV", subtype="PCM_16")
    return buffer.getvalue()
