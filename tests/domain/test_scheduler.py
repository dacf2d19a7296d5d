import pytest

from hermie.domain.constants import EASE_MAX, EASE_MIN, MS_PER_DAY
from hermie.domain.entities.card import Card
from hermie.domain.services.scheduler import SchedulingEngine, schedule
from hermie.domain.value_objects.card_state import CardState
from hermie.domain.value_objects.rating import Rating
from hermie.domain.value_objects.results import GradeError, GradeFailed, Graded

T = 1_700_000_000_000


def _card(**overrides) -> Card:
    card = Card.create(id="c1", subject_id="inbox", image_path="images/inbox/c1.png", created_at=T - 1000)
    return card.with_schedule(**overrides)


class TestSchedule:
    def test_good_from_new_graduates_to_one_day(self):
        updated = schedule(_card(), Rating.GOOD, T)

        assert updated.state is CardState.REVIEW
        assert updated.interval_days == 1
        assert updated.due_at == T + 86_400_000
        assert updated.ease == pytest.approx(2.35)
        assert updated.reps == 1
        assert updated.last_reviewed_at == T

    def test_again_from_review_relearns_for_ten_minutes(self):
        card = _card(state=CardState.REVIEW, interval_days=5.0, ease=2.3, reps=4, lapses=1)

        updated = schedule(card, Rating.AGAIN, T)

        assert updated.state is CardState.LEARNING
        assert updated.interval_days == 0
        assert updated.due_at == T + 600_000
        assert updated.ease == pytest.approx(2.1)
        assert updated.reps == 0
        assert updated.lapses == 2

    def test_easy_from_review_multiplies_interval_with_bonus(self):
        card = _card(state=CardState.REVIEW, interval_days=2.0, ease=2.5)

        updated = schedule(card, Rating.EASY, T)

        assert updated.interval_days == pytest.approx(6.5)
        assert updated.due_at == round(T + 6.5 * MS_PER_DAY)
        assert updated.ease == pytest.approx(2.6)

    def test_easy_from_new_graduates_to_three_days(self):
        updated = schedule(_card(), Rating.EASY, T)

        assert updated.state is CardState.REVIEW
        assert updated.interval_days == 3
        assert updated.ease == pytest.approx(2.45)

    def test_good_from_learning_graduates(self):
        card = _card(state=CardState.LEARNING, interval_days=0.0, ease=2.1)

        updated = schedule(card, Rating.GOOD, T)

        assert updated.state is CardState.REVIEW
        assert updated.interval_days == 1
        assert updated.ease == pytest.approx(2.15)

    def test_good_from_review_uses_minimum_interval(self):
        card = _card(state=CardState.REVIEW, interval_days=0.2, ease=1.3)

        updated = schedule(card, Rating.GOOD, T)

        assert updated.interval_days == 1
        assert updated.due_at == T + MS_PER_DAY

    def test_good_from_review_grows_interval_by_ease(self):
        card = _card(state=CardState.REVIEW, interval_days=4.0, ease=2.5)

        updated = schedule(card, Rating.GOOD, T)

        assert updated.interval_days == pytest.approx(10.0)
        assert updated.ease == pytest.approx(2.52)
        assert updated.reps == card.reps + 1

    def test_ease_clamped_at_bounds(self):
        low = schedule(_card(state=CardState.REVIEW, ease=1.4, interval_days=3.0), Rating.AGAIN, T)
        high = schedule(_card(state=CardState.REVIEW, ease=2.75, interval_days=3.0), Rating.EASY, T)

        assert low.ease == EASE_MIN
        assert high.ease == EASE_MAX

    def test_ease_stays_within_bounds_over_many_grades(self):
        card = _card()
        now = T
        ratings = [Rating.AGAIN] * 10 + [Rating.EASY] * 15 + [Rating.GOOD, Rating.AGAIN] * 5

        for rating in ratings:
            card = schedule(card, rating, now)
            assert EASE_MIN <= card.ease <= EASE_MAX
            assert card.due_at >= now
            now = card.due_at

    def test_does_not_mutate_input(self):
        card = _card()

        schedule(card, Rating.GOOD, T)

        assert card.state is CardState.NEW
        assert card.reps == 0

    def test_identity_fields_preserved(self):
        card = _card()

        updated = schedule(card, Rating.EASY, T)

        assert (updated.id, updated.subject_id, updated.image_path, updated.created_at) == (
            card.id,
            card.subject_id,
            card.image_path,
            card.created_at,
        )


class TestSchedulingEngine:
    @pytest.mark.asyncio
    async def test_grade_persists_updated_card(self, memory_store):
        await memory_store.insert_card(_card())
        engine = SchedulingEngine(memory_store)

        result = await engine.grade("c1", Rating.GOOD, T)

        assert isinstance(result, Graded)
        assert result.ok is True
        stored = await memory_store.get_card("c1")
        assert stored == result.card
        assert stored.state is CardState.REVIEW

    @pytest.mark.asyncio
    async def test_grade_missing_card(self, memory_store):
        engine = SchedulingEngine(memory_store)

        result = await engine.grade("missing", Rating.GOOD, T)

        assert result == GradeFailed(error=GradeError.CARD_NOT_FOUND)
        assert result.error.message == "Card not found"

    @pytest.mark.asyncio
    async def test_grade_refuses_locked_card(self, memory_store):
        await memory_store.insert_card(_card())
        engine = SchedulingEngine(memory_store, is_card_locked=lambda card_id: card_id == "c1")

        result = await engine.grade("c1", Rating.GOOD, T)

        assert result == GradeFailed(error=GradeError.CARD_NOT_FOUND)
        assert (await memory_store.get_card("c1")).state is CardState.NEW

    @pytest.mark.asyncio
    async def test_grade_card_deleted_before_write(self, memory_store):
        await memory_store.insert_card(_card())
        memory_store.update_card = _async_return(False)
        engine = SchedulingEngine(memory_store)

        result = await engine.grade("c1", Rating.GOOD, T)

        assert result == GradeFailed(error=GradeError.CARD_NOT_FOUND)

    @pytest.mark.asyncio
    async def test_due_count_and_next_due(self, memory_store):
        await memory_store.insert_card(_card(id="late", due_at=T - 10, created_at=T - 100))
        await memory_store.insert_card(_card(id="early-b", due_at=T - 50, created_at=T - 20))
        await memory_store.insert_card(_card(id="early-a", due_at=T - 50, created_at=T - 30))
        await memory_store.insert_card(_card(id="future", due_at=T + 10))
        engine = SchedulingEngine(memory_store)

        assert await engine.due_count("inbox", T) == 3
        assert (await engine.next_due("inbox", T)).id == "early-a"
        assert await engine.next_due("inbox", T - 1000) is None

    @pytest.mark.asyncio
    async def test_due_at_boundary_is_due(self, memory_store):
        await memory_store.insert_card(_card(id="edge", due_at=T))
        engine = SchedulingEngine(memory_store)

        assert await engine.due_count("inbox", T) == 1
        assert await engine.due_count("inbox", T - 1) == 0


def _async_return(value):
    async def _inner(*args, **kwargs):
        return value

    return _inner
