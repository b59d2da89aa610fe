"""
NoteApp Backend — Note Service Unit Tests
==========================================

What:  Tests for NoteService business rules.
How:   Runs against a real in-memory SQLite database through NoteRepository;
       a mocked repository is used where a persistence failure is injected.

What we test:
    ✅ add stamps equal timestamps and defaults likes to 0
    ✅ modify merges only non-null fields and only positive likes
    ✅ delete removes, reports NotFoundError, wraps other failures
    ✅ search, count, word count, average length
    ✅ like / unlike / boost / reset arithmetic and timestamp behavior
    ✅ top-liked ranking is capped, descending, and stable
    ✅ every id-addressed operation raises NotFoundError for a missing id
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import OperationalError

from noteapp.exceptions import InternalError, NotFoundError
from noteapp.models.note import Note
from noteapp.schemas.note import NoteCreate, NoteUpdate
from noteapp.services.note_service import NoteService, count_words

MISSING_ID = 9999


async def add_note(service, subject="Math", description="two plus two", likes=0):
    return await service.add(NoteCreate(subject=subject, description=description, likes=likes))


def backdate(note, minutes=5):
    """Move both timestamps into the past so a later refresh is observable."""
    past = datetime.now(timezone.utc) - timedelta(minutes=minutes)
    note.created_at = past
    note.updated_at = past
    return past


class TestNoteServiceAdd:

    @pytest.mark.asyncio
    async def test_add_assigns_id_and_equal_timestamps(self, note_service):
        note = await add_note(note_service)

        assert note.id is not None
        assert note.likes == 0
        assert note.created_at is not None
        assert note.created_at == note.updated_at

    @pytest.mark.asyncio
    async def test_get_after_add_returns_same_record(self, note_service):
        added = await add_note(note_service, subject="History", description="the war ended")

        fetched = await note_service.get_by_id(added.id)

        assert fetched.subject == "History"
        assert fetched.description == "the war ended"
        assert fetched.likes == 0
        assert fetched.created_at == fetched.updated_at

    @pytest.mark.asyncio
    async def test_add_keeps_positive_initial_likes(self, note_service):
        note = await add_note(note_service, likes=7)
        assert note.likes == 7

    @pytest.mark.asyncio
    async def test_ids_are_distinct(self, note_service):
        first = await add_note(note_service)
        second = await add_note(note_service)
        assert first.id != second.id

    @pytest.mark.asyncio
    async def test_add_wraps_persistence_failure(self, mock_repository):
        mock_repository.insert.side_effect = OperationalError("INSERT", {}, Exception("disk full"))
        service = NoteService(mock_repository)

        with pytest.raises(InternalError) as exc_info:
            await service.add(NoteCreate(subject="s", description="d"))

        assert exc_info.value.message == "Unable to save note"
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_add_commits_before_returning(self, mock_repository):
        mock_repository.insert.side_effect = lambda note: note
        service = NoteService(mock_repository)

        await service.add(NoteCreate(subject="s", description="d"))

        mock_repository.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_add_wraps_commit_failure(self, mock_repository):
        mock_repository.insert.side_effect = lambda note: note
        mock_repository.commit.side_effect = OperationalError("COMMIT", {}, Exception("database is locked"))
        service = NoteService(mock_repository)

        with pytest.raises(InternalError) as exc_info:
            await service.add(NoteCreate(subject="s", description="d"))

        assert exc_info.value.message == "Unable to save note"


class TestNoteServiceModify:

    @pytest.mark.asyncio
    async def test_subject_only_patch_keeps_other_fields(self, note_service):
        note = await add_note(note_service, description="keep this text", likes=4)
        before = backdate(note)

        updated = await note_service.modify(note.id, NoteUpdate(subject="Physics"))

        assert updated.subject == "Physics"
        assert updated.description == "keep this text"
        assert updated.likes == 4
        assert updated.updated_at > before
        assert updated.created_at == before

    @pytest.mark.asyncio
    async def test_description_replaced_when_given(self, note_service):
        note = await add_note(note_service, subject="Math")

        updated = await note_service.modify(note.id, NoteUpdate(description="three plus three"))

        assert updated.subject == "Math"
        assert updated.description == "three plus three"

    @pytest.mark.asyncio
    async def test_positive_likes_replace_count(self, note_service):
        note = await add_note(note_service, likes=2)

        updated = await note_service.modify(note.id, NoteUpdate(likes=9))

        assert updated.likes == 9

    @pytest.mark.asyncio
    @pytest.mark.parametrize("likes", [0, -3, None])
    async def test_non_positive_likes_are_ignored(self, note_service, likes):
        # Known quirk: modify can never lower or zero the counter
        note = await add_note(note_service, likes=5)

        updated = await note_service.modify(note.id, NoteUpdate(likes=likes))

        assert updated.likes == 5

    @pytest.mark.asyncio
    async def test_empty_patch_still_refreshes_updated_at(self, note_service):
        note = await add_note(note_service)
        before = backdate(note)

        updated = await note_service.modify(note.id, NoteUpdate())

        assert updated.updated_at > before
        assert updated.created_at <= updated.updated_at

    @pytest.mark.asyncio
    async def test_modify_missing_note(self, note_service):
        with pytest.raises(NotFoundError):
            await note_service.modify(MISSING_ID, NoteUpdate(subject="x"))


class TestNoteServiceDelete:

    @pytest.mark.asyncio
    async def test_delete_removes_note(self, note_service):
        note = await add_note(note_service)

        await note_service.delete(note.id)

        with pytest.raises(NotFoundError):
            await note_service.get_by_id(note.id)
        assert await note_service.count_all() == 0

    @pytest.mark.asyncio
    async def test_delete_missing_note(self, note_service):
        with pytest.raises(NotFoundError) as exc_info:
            await note_service.delete(MISSING_ID)
        assert exc_info.value.message == f"Note with ID {MISSING_ID} not found"

    @pytest.mark.asyncio
    async def test_delete_wraps_unexpected_failure(self, mock_repository):
        mock_repository.find_by_id.return_value = Note(id=1, subject="s", description="d", likes=0)
        mock_repository.delete.side_effect = RuntimeError("connection reset")
        service = NoteService(mock_repository)

        with pytest.raises(InternalError) as exc_info:
            await service.delete(1)

        assert exc_info.value.message == "Unable to delete note"
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_delete_wraps_commit_failure(self, mock_repository):
        mock_repository.find_by_id.return_value = Note(id=1, subject="s", description="d", likes=0)
        mock_repository.commit.side_effect = RuntimeError("database is locked")
        service = NoteService(mock_repository)

        with pytest.raises(InternalError) as exc_info:
            await service.delete(1)

        assert exc_info.value.message == "Unable to delete note"

    @pytest.mark.asyncio
    async def test_delete_not_found_is_not_wrapped(self, mock_repository):
        mock_repository.find_by_id.return_value = None
        service = NoteService(mock_repository)

        with pytest.raises(NotFoundError):
            await service.delete(1)
        mock_repository.delete.assert_not_awaited()


class TestNoteServiceReads:

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive_substring(self, note_service):
        await add_note(note_service, subject="Mathematics")
        await add_note(note_service, subject="applied MATH")
        await add_note(note_service, subject="History")

        found = await note_service.search_by_subject("math")

        assert [n.subject for n in found] == ["Mathematics", "applied MATH"]

    @pytest.mark.asyncio
    async def test_search_without_match_returns_empty_list(self, note_service):
        await add_note(note_service, subject="Math")

        assert await note_service.search_by_subject("biology") == []

    @pytest.mark.asyncio
    async def test_search_treats_wildcards_literally(self, note_service):
        await add_note(note_service, subject="100% done")
        await add_note(note_service, subject="1000 things")

        found = await note_service.search_by_subject("0%")

        assert [n.subject for n in found] == ["100% done"]

    @pytest.mark.asyncio
    async def test_get_all_in_store_order(self, note_service):
        first = await add_note(note_service, subject="a")
        second = await add_note(note_service, subject="b")

        notes = await note_service.get_all()

        assert [n.id for n in notes] == [first.id, second.id]

    @pytest.mark.asyncio
    async def test_get_missing_note(self, note_service):
        with pytest.raises(NotFoundError) as exc_info:
            await note_service.get_by_id(MISSING_ID)
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_count_all(self, note_service):
        assert await note_service.count_all() == 0
        await add_note(note_service)
        await add_note(note_service)
        assert await note_service.count_all() == 2

    @pytest.mark.asyncio
    async def test_word_count_collapses_whitespace_runs(self, note_service):
        note = await add_note(note_service, description="a b  c")
        assert await note_service.word_count(note.id) == 3

    @pytest.mark.asyncio
    async def test_word_count_missing_note(self, note_service):
        with pytest.raises(NotFoundError):
            await note_service.word_count(MISSING_ID)

    @pytest.mark.asyncio
    async def test_average_length_empty_store(self, note_service):
        assert await note_service.average_length() == 0.0

    @pytest.mark.asyncio
    async def test_average_length_is_mean_word_count(self, note_service):
        await add_note(note_service, description="one two three")
        await add_note(note_service, description="four")

        assert await note_service.average_length() == pytest.approx(2.0)


class TestCountWords:

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("two plus two", 3),
            ("a b  c", 3),
            ("  leading and trailing  ", 3),
            ("tabs\tand\nnewlines", 3),
            ("", 0),
            ("   ", 0),
        ],
    )
    def test_count_words(self, text, expected):
        assert count_words(text) == expected


class TestNoteServiceLikes:

    @pytest.mark.asyncio
    async def test_like_increments_and_refreshes_updated_at(self, note_service):
        note = await add_note(note_service)
        before = backdate(note)

        liked = await note_service.like(note.id)

        assert liked.likes == 1
        assert liked.updated_at > before

    @pytest.mark.asyncio
    async def test_unlike_at_zero_stays_zero(self, note_service):
        note = await add_note(note_service)

        unliked = await note_service.unlike(note.id)

        assert unliked.likes == 0

    @pytest.mark.asyncio
    async def test_unlike_refreshes_updated_at(self, note_service):
        note = await add_note(note_service, likes=3)
        before = backdate(note)

        unliked = await note_service.unlike(note.id)

        assert unliked.likes == 2
        assert unliked.updated_at > before

    @pytest.mark.asyncio
    @pytest.mark.parametrize("start", [0, 1, 12])
    async def test_like_then_unlike_restores_count(self, note_service, start):
        note = await add_note(note_service, likes=start)

        await note_service.like(note.id)
        restored = await note_service.unlike(note.id)

        assert restored.likes == start

    @pytest.mark.asyncio
    @pytest.mark.parametrize("start", [0, 4, 95])
    async def test_boost_adds_exactly_ten(self, note_service, start):
        note = await add_note(note_service, likes=start)

        boosted = await note_service.boost_likes(note.id)

        assert boosted.likes == start + 10

    @pytest.mark.asyncio
    async def test_boost_does_not_refresh_updated_at(self, note_service):
        # Known quirk: boost leaves updated_at untouched
        note = await add_note(note_service)
        before = backdate(note)

        boosted = await note_service.boost_likes(note.id)

        assert boosted.updated_at == before

    @pytest.mark.asyncio
    @pytest.mark.parametrize("start", [0, 1, 30])
    async def test_reset_sets_zero(self, note_service, start):
        note = await add_note(note_service, likes=start)

        reset = await note_service.reset_likes(note.id)

        assert reset.likes == 0

    @pytest.mark.asyncio
    async def test_reset_does_not_refresh_updated_at(self, note_service):
        # Known quirk: reset leaves updated_at untouched
        note = await add_note(note_service, likes=6)
        before = backdate(note)

        reset = await note_service.reset_likes(note.id)

        assert reset.updated_at == before

    @pytest.mark.asyncio
    async def test_get_liked_only_returns_positive_counts(self, note_service):
        await add_note(note_service, subject="zero")
        await add_note(note_service, subject="one", likes=1)
        await add_note(note_service, subject="many", likes=8)

        liked = await note_service.get_liked()

        assert [n.subject for n in liked] == ["one", "many"]

    @pytest.mark.asyncio
    async def test_top_liked_capped_and_descending(self, note_service):
        for likes in [3, 9, 0, 5, 1, 7, 2]:
            await add_note(note_service, subject=f"n{likes}", likes=likes)

        top = await note_service.get_top_liked()

        assert [n.likes for n in top] == [9, 7, 5, 3, 2]

    @pytest.mark.asyncio
    async def test_top_liked_ties_keep_store_order(self, note_service):
        first = await add_note(note_service, subject="first", likes=4)
        second = await add_note(note_service, subject="second", likes=4)
        third = await add_note(note_service, subject="third", likes=6)

        top = await note_service.get_top_liked()

        assert [n.id for n in top] == [third.id, first.id, second.id]

    @pytest.mark.asyncio
    async def test_top_liked_with_few_notes(self, note_service):
        await add_note(note_service, likes=1)
        assert len(await note_service.get_top_liked()) == 1


class TestNoteServiceMissingIds:

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "operation",
        ["get_by_id", "delete", "word_count", "like", "unlike", "boost_likes", "reset_likes"],
    )
    async def test_missing_id_raises_not_found(self, note_service, operation):
        with pytest.raises(NotFoundError):
            await getattr(note_service, operation)(MISSING_ID)


class TestNoteServiceScenario:

    @pytest.mark.asyncio
    async def test_math_note_lifecycle(self, note_service):
        note = await add_note(note_service, subject="Math", description="two plus two")
        assert note.likes == 0
        assert await note_service.word_count(note.id) == 3

        for _ in range(3):
            note = await note_service.like(note.id)
        assert note.likes == 3

        note = await note_service.reset_likes(note.id)
        assert note.likes == 0

        await note_service.delete(note.id)
        with pytest.raises(NotFoundError):
            await note_service.get_by_id(note.id)
