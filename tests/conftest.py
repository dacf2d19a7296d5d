import asyncio

import pytest

from hermie.adapters.memory_store import InMemoryImageStore, InMemoryStore
from hermie.domain.services.capture_session import CaptureSession
from hermie.domain.services.subject_service import SubjectService
from hermie.infrastructure.image_store import FileImageStore
from hermie.infrastructure.sqlite_store import SqliteStore
from hermie.ports.acquisition import AcquisitionCancelled, CancellationToken

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image-data"
START_MS = 1_700_000_000_000


class FakeClock:
    """Manually advanced epoch-millisecond clock."""

    def __init__(self, now: int = START_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class RecordingObserver:
    """CaptureObserver that remembers every notification."""

    def __init__(self):
        self.saved: list[tuple[str, str, int]] = []
        self.notices: list[str] = []

    def on_capture_saved(self, card_id: str, image_ref: str, remaining_window_ms: int) -> None:
        self.saved.append((card_id, image_ref, remaining_window_ms))

    def on_notice(self, message: str) -> None:
        self.notices.append(message)


class FakeAcquisition:
    """Scriptable AcquisitionSource.

    By default returns PNG_BYTES immediately. Set `hold` to make acquire()
    wait until release() or cancellation; set `error` to raise instead.
    """

    def __init__(self, data: bytes = PNG_BYTES, supports_explicit_cancel: bool = True):
        self.data = data
        self.error: Exception | None = None
        self.supports_explicit_cancel = supports_explicit_cancel
        self.staging_empty = True
        self.hold = False
        self.calls = 0
        self.clears = 0
        self.started = asyncio.Event()
        self._released = asyncio.Event()

    def release(self) -> None:
        self._released.set()

    async def clear_staging(self) -> None:
        self.clears += 1

    async def staging_is_empty(self) -> bool:
        return self.staging_empty

    async def acquire(self, cancel: CancellationToken) -> bytes:
        self.calls += 1
        self.started.set()
        if self.hold:
            released = asyncio.create_task(self._released.wait())
            cancelled = asyncio.create_task(cancel.wait())
            await asyncio.wait({released, cancelled}, return_when=asyncio.FIRST_COMPLETED)
            released.cancel()
            cancelled.cancel()
            if cancel.is_cancelled:
                raise AcquisitionCancelled("cancelled")
        if self.error is not None:
            raise self.error
        return self.data


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def observer():
    return RecordingObserver()


@pytest.fixture
def acquisition():
    return FakeAcquisition()


@pytest.fixture
def memory_store():
    return InMemoryStore()


@pytest.fixture
def memory_images():
    return InMemoryImageStore()


@pytest.fixture
def sqlite_store(tmp_path):
    return SqliteStore(tmp_path / "db.sqlite")


@pytest.fixture
def file_images(tmp_path):
    store = FileImageStore(tmp_path)
    store.ensure_dirs()
    return store


@pytest.fixture
def subject_service(memory_store, memory_images, clock):
    return SubjectService(memory_store, memory_store, memory_images, clock=clock)


@pytest.fixture
def make_session(acquisition, memory_store, memory_images, subject_service, observer, clock):
    """Factory for CaptureSession over in-memory stores with a fake clock."""

    counter = iter(range(1, 1_000_000))

    def _make(**overrides) -> CaptureSession:
        kwargs = {
            "acquisition": acquisition,
            "card_repository": memory_store,
            "image_store": memory_images,
            "subject_service": subject_service,
            "observer": observer,
            "undo_window_ms": 5000,
            "cancel_grace_ms": 250,
            "clock": clock,
            "id_factory": lambda: f"card-{next(counter)}",
        }
        kwargs.update(overrides)
        return CaptureSession(**kwargs)

    return _make
