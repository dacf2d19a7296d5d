import pytest

from hermie.adapters.acquisition import (
    ScreencaptureAcquisition,
    SnipClipboardAcquisition,
    UnsupportedAcquisition,
)
from hermie.adapters.memory_store import InMemoryImageStore, InMemoryStore
from hermie.composition import (
    create_acquisition_source,
    create_capture_library,
    create_capture_session,
    create_scheduling_engine,
    create_stores,
    create_subject_service,
)
from hermie.domain.value_objects.rating import Rating
from hermie.domain.value_objects.results import GradeFailed
from hermie.infrastructure.image_store import FileImageStore
from hermie.infrastructure.sqlite_store import SqliteStore


@pytest.mark.parametrize(
    ("platform", "expected"),
    [
        ("darwin", ScreencaptureAcquisition),
        ("win32", SnipClipboardAcquisition),
        ("linux", UnsupportedAcquisition),
    ],
)
def test_auto_acquisition_by_platform(platform, expected):
    assert isinstance(create_acquisition_source("auto", platform=platform), expected)


def test_explicit_acquisition_method_wins(monkeypatch):
    monkeypatch.setenv("HERMIE_ACQUISITION", "unsupported")

    assert isinstance(create_acquisition_source(platform="darwin"), UnsupportedAcquisition)
    assert isinstance(create_acquisition_source("snip", platform="linux"), SnipClipboardAcquisition)


def test_memory_stores():
    store, images = create_stores("memory")

    assert isinstance(store, InMemoryStore)
    assert isinstance(images, InMemoryImageStore)


def test_sqlite_stores_use_data_dir(monkeypatch, tmp_path):
    monkeypatch.setenv("HERMIE_DATA_DIR", str(tmp_path))

    store, images = create_stores("sqlite")

    assert isinstance(store, SqliteStore)
    assert isinstance(images, FileImageStore)
    assert (tmp_path / "db.sqlite").exists()
    assert (tmp_path / "images").is_dir()


@pytest.mark.asyncio
async def test_wired_services_share_state(monkeypatch, acquisition):
    monkeypatch.setenv("HERMIE_UNDO_WINDOW_MS", "1234")
    store, images = create_stores("memory")
    subjects = create_subject_service(store, images)
    session = create_capture_session(acquisition, store, images, subjects)
    engine = create_scheduling_engine(store, session)
    library = create_capture_library(store, images)

    saved = await session.begin_capture("inbox")

    assert session.undo_token.expires_at - saved.card.created_at >= 1234
    assert [c.id for c in await library.latest("inbox", 5)] == [saved.card.id]
    assert await engine.due_count("inbox", saved.card.created_at) == 1

    await session.undo(saved.card.id)
    assert isinstance(await engine.grade(saved.card.id, Rating.GOOD, 0), GradeFailed)
