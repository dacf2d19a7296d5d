import pytest

from hermie.domain.entities.card import Card
from hermie.domain.services.subject_service import slugify_subject_name
from hermie.domain.value_objects.results import (
    SubjectDeleted,
    SubjectError,
    SubjectRejected,
    SubjectSaved,
)


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("Biology", "biology"),
        ("  Organic Chemistry 101 ", "organic-chemistry-101"),
        ("C++ / Rust!", "c-rust"),
        ("???", "subject"),
    ],
)
def test_slugify_subject_name(name, expected):
    assert slugify_subject_name(name) == expected


class TestCreateSubject:
    @pytest.mark.asyncio
    async def test_creates_with_slug_id(self, subject_service, clock):
        result = await subject_service.create_subject("  Organic Chemistry ")

        assert isinstance(result, SubjectSaved)
        assert result.subject.id == "organic-chemistry"
        assert result.subject.name == "Organic Chemistry"
        assert result.subject.created_at == clock.now

    @pytest.mark.asyncio
    async def test_empty_name_rejected(self, subject_service):
        result = await subject_service.create_subject("   ")

        assert result == SubjectRejected(error=SubjectError.INVALID_NAME)
        assert result.ok is False

    @pytest.mark.asyncio
    async def test_duplicate_name_is_case_insensitive(self, subject_service):
        await subject_service.create_subject("Biology")

        result = await subject_service.create_subject("BIOLOGY")

        assert result == SubjectRejected(error=SubjectError.DUPLICATE_NAME)

    @pytest.mark.asyncio
    async def test_inbox_name_is_taken(self, subject_service):
        result = await subject_service.create_subject("inbox")

        assert result == SubjectRejected(error=SubjectError.DUPLICATE_NAME)

    @pytest.mark.asyncio
    async def test_colliding_slug_gets_suffix(self, subject_service):
        first = await subject_service.create_subject("Math!")
        second = await subject_service.create_subject("Math?")
        third = await subject_service.create_subject("Math.")

        assert [first.subject.id, second.subject.id, third.subject.id] == [
            "math",
            "math-2",
            "math-3",
        ]

    @pytest.mark.asyncio
    async def test_listed_after_inbox(self, subject_service):
        await subject_service.create_subject("Biology")

        subjects = await subject_service.list_subjects()

        assert [s.id for s in subjects] == ["inbox", "biology"]
        assert subjects[0].is_reserved is True


class TestRenameSubject:
    @pytest.mark.asyncio
    async def test_rename(self, subject_service):
        await subject_service.create_subject("Biology")

        result = await subject_service.rename_subject("biology", "Bio")

        assert isinstance(result, SubjectSaved)
        assert result.subject.id == "biology"
        assert result.subject.name == "Bio"

    @pytest.mark.asyncio
    async def test_rename_to_own_name_with_different_case(self, subject_service):
        await subject_service.create_subject("Biology")

        result = await subject_service.rename_subject("biology", "BIOLOGY")

        assert isinstance(result, SubjectSaved)

    @pytest.mark.asyncio
    async def test_inbox_is_reserved(self, subject_service):
        result = await subject_service.rename_subject("inbox", "Other")

        assert result == SubjectRejected(error=SubjectError.RESERVED_SUBJECT)

    @pytest.mark.asyncio
    async def test_duplicate(self, subject_service):
        await subject_service.create_subject("Biology")
        await subject_service.create_subject("Physics")

        result = await subject_service.rename_subject("physics", "biology")

        assert result == SubjectRejected(error=SubjectError.DUPLICATE_NAME)

    @pytest.mark.asyncio
    async def test_unknown(self, subject_service):
        result = await subject_service.rename_subject("nope", "Name")

        assert result == SubjectRejected(error=SubjectError.NOT_FOUND)


class TestDeleteSubject:
    @pytest.mark.asyncio
    async def test_removes_cards_and_images(self, subject_service, memory_store, memory_images):
        await subject_service.create_subject("Biology")
        for card_id in ("a", "b"):
            stored = await memory_images.save("biology", card_id, b"png")
            await memory_store.insert_card(
                Card.create(id=card_id, subject_id="biology", image_path=stored.relative_path, created_at=1)
            )
        await memory_images.save("inbox", "keep", b"png")

        result = await subject_service.delete_subject("biology")

        assert result == SubjectDeleted(subject_id="biology", cards_removed=2)
        assert await memory_store.get_subject("biology") is None
        assert await memory_store.count_cards("biology") == 0
        assert len(memory_images) == 1

    @pytest.mark.asyncio
    async def test_inbox_is_reserved(self, subject_service):
        result = await subject_service.delete_subject("inbox")

        assert result == SubjectRejected(error=SubjectError.RESERVED_SUBJECT)

    @pytest.mark.asyncio
    async def test_unknown(self, subject_service):
        result = await subject_service.delete_subject("nope")

        assert result == SubjectRejected(error=SubjectError.NOT_FOUND)


class TestSanitizeSubjectId:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw", [None, "", "   ", "missing", "!!!"])
    async def test_falls_back_to_inbox(self, subject_service, raw):
        assert await subject_service.sanitize_subject_id(raw) == "inbox"

    @pytest.mark.asyncio
    async def test_strips_invalid_characters(self, subject_service):
        await subject_service.create_subject("Math 2")

        assert await subject_service.sanitize_subject_id(" Math-2 ") == "math-2"
        assert await subject_service.sanitize_subject_id("ma/th-2") == "math-2"
