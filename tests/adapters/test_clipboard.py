import pytest
from PIL import Image

from hermie.adapters.clipboard import ClipboardStaging

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


class FakeClipboard:
    def __init__(self, content=None):
        self.content = content

    def __call__(self):
        if isinstance(self.content, Exception):
            raise self.content
        return self.content


def _image(color: str) -> Image.Image:
    return Image.new("RGB", (4, 4), color)


@pytest.mark.asyncio
async def test_image_present_before_clear_is_not_new():
    clipboard = FakeClipboard(_image("red"))
    staging = ClipboardStaging(grab=clipboard)

    await staging.clear()

    assert await staging.read_new() is None
    assert await staging.is_empty() is True


@pytest.mark.asyncio
async def test_new_image_after_clear_is_returned_as_png():
    clipboard = FakeClipboard(_image("red"))
    staging = ClipboardStaging(grab=clipboard)
    await staging.clear()

    clipboard.content = _image("blue")
    png = await staging.read_new()

    assert png is not None
    assert png.startswith(PNG_SIGNATURE)
    assert await staging.is_empty() is False


@pytest.mark.asyncio
async def test_empty_clipboard():
    staging = ClipboardStaging(grab=FakeClipboard(None))
    await staging.clear()

    assert await staging.read_new() is None


@pytest.mark.asyncio
async def test_copied_image_file_is_read(tmp_path):
    path = tmp_path / "shot.png"
    _image("green").save(path)
    clipboard = FakeClipboard(None)
    staging = ClipboardStaging(grab=clipboard)
    await staging.clear()

    clipboard.content = [str(path)]

    assert (await staging.read_new()).startswith(PNG_SIGNATURE)


@pytest.mark.asyncio
async def test_copied_non_image_file_is_ignored(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("not an image")
    staging = ClipboardStaging(grab=FakeClipboard([str(path)]))

    assert await staging.read_new() is None


@pytest.mark.asyncio
async def test_missing_clipboard_backend_reads_as_empty():
    staging = ClipboardStaging(grab=FakeClipboard(NotImplementedError("no xclip")))

    await staging.clear()

    assert await staging.read_new() is None
