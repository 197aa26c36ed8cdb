"""
iBuddy Backend — Mentee & Note Store Tests
============================================

What:  Tests for MenteeService against an in-memory SQLite store.
Why:   Mentees and notes share one table; the key layout decides which rows
       a query sees, so it is exercised on real rows.

What we test:
    ✅ New mentees start ASSIGNED whatever the caller sends
    ✅ Mentee emails are stored lowercased; uniqueness ignores case
    ✅ Buddy listings and counts only see that buddy's mentees
    ✅ Notes never show up as mentees and vice versa
    ✅ Status updates touch only the status
    ✅ Note updates stamp updated_at
    ✅ Deleting a mentee deletes its notes, and nobody else's
"""

from datetime import date, timedelta

import pytest
from sqlalchemy import func, select

from ibuddy.models.mentee import MenteeItem, MenteeStatus
from ibuddy.schemas.mentee import MenteeCreate
from ibuddy.services.mentee_service import MenteeService

BUDDY_ID = "User#buddy@example.com"
OTHER_BUDDY_ID = "User#other@example.com"


class TestCreateMentee:

    def setup_method(self):
        self.service = MenteeService()

    @pytest.mark.asyncio
    async def test_create_forces_assigned_status(self, db_session, mentee_data):
        payload = mentee_data(BUDDY_ID, status=MenteeStatus.SERVED.value)
        mentee = await self.service.create_mentee(db_session, MenteeCreate(**payload))

        assert mentee.status is MenteeStatus.ASSIGNED
        assert mentee.buddy_id == BUDDY_ID

    @pytest.mark.asyncio
    async def test_create_assigns_fresh_ids(self, db_session, mentee_data):
        first = await self.service.create_mentee(db_session, MenteeCreate(**mentee_data(BUDDY_ID, "a@uni.example.org")))
        second = await self.service.create_mentee(db_session, MenteeCreate(**mentee_data(BUDDY_ID, "b@uni.example.org")))
        assert first.id != second.id

    @pytest.mark.asyncio
    async def test_email_and_country_are_normalized(self, db_session, mentee_data):
        mentee = await self.service.create_mentee(
            db_session, MenteeCreate(**mentee_data(BUDDY_ID, "Marco.Rossi@Uni.Example.org"))
        )
        assert mentee.email == "marco.rossi@uni.example.org"
        assert mentee.country_code == "IT"

    @pytest.mark.asyncio
    async def test_mentee_row_key_layout(self, db_session, mentee_data):
        mentee = await self.service.create_mentee(db_session, MenteeCreate(**mentee_data(BUDDY_ID)))
        item = await db_session.get(MenteeItem, (f"Mentee#{mentee.id}", f"Mentee#{mentee.id}"))
        assert item is not None
        assert item.id == mentee.id

    @pytest.mark.asyncio
    async def test_is_email_unique_ignores_case(self, db_session, make_mentee):
        assert await self.service.is_email_unique(db_session, "mentee@uni.example.org")
        await make_mentee(BUDDY_ID, "mentee@uni.example.org")
        assert not await self.service.is_email_unique(db_session, "MENTEE@uni.example.org")


class TestMenteeQueries:

    def setup_method(self):
        self.service = MenteeService()

    @pytest.mark.asyncio
    async def test_get_missing_mentee_is_none(self, db_session):
        assert await self.service.get_mentee_by_id(db_session, "does-not-exist") is None

    @pytest.mark.asyncio
    async def test_buddy_listing_and_count(self, db_session, make_mentee):
        await make_mentee(BUDDY_ID, "one@uni.example.org", last_name="Bianchi")
        await make_mentee(BUDDY_ID, "two@uni.example.org", last_name="Amato")
        await make_mentee(OTHER_BUDDY_ID, "three@uni.example.org")

        mine = await self.service.get_mentee_list_items(db_session, BUDDY_ID)
        assert [m.last_name for m in mine] == ["Amato", "Bianchi"]
        assert await self.service.get_mentee_count(db_session, BUDDY_ID) == 2
        assert await self.service.get_mentee_count(db_session, OTHER_BUDDY_ID) == 1
        assert await self.service.get_mentee_count(db_session, "User#nobody@example.com") == 0

    @pytest.mark.asyncio
    async def test_all_mentees_excludes_notes(self, db_session, make_mentee):
        mentee = await make_mentee(BUDDY_ID)
        await self.service.create_note(db_session, mentee.id, "First call", author_id=BUDDY_ID)

        everyone = await self.service.get_all_mentees(db_session)
        assert [m.id for m in everyone] == [mentee.id]


class TestMenteeUpdates:

    def setup_method(self):
        self.service = MenteeService()

    @pytest.mark.asyncio
    async def test_update_status_only_touches_status(self, db_session, make_mentee):
        mentee = await make_mentee(BUDDY_ID)
        updated = await self.service.update_mentee_status(db_session, mentee.id, MenteeStatus.CONTACTED)

        assert updated.status is MenteeStatus.CONTACTED
        assert updated.model_dump(exclude={"status"}) == mentee.model_dump(exclude={"status"})

    @pytest.mark.asyncio
    async def test_any_status_may_follow_any_other(self, db_session, make_mentee):
        mentee = await make_mentee(BUDDY_ID)
        for status in (MenteeStatus.SERVED, MenteeStatus.ASSIGNED, MenteeStatus.REJECTED):
            updated = await self.service.update_mentee_status(db_session, mentee.id, status)
            assert updated.status is status

    @pytest.mark.asyncio
    async def test_update_status_of_missing_mentee(self, db_session):
        assert await self.service.update_mentee_status(db_session, "ghost", MenteeStatus.MET) is None

    @pytest.mark.asyncio
    async def test_update_mentee_replaces_record(self, db_session, make_mentee):
        mentee = await make_mentee(BUDDY_ID)
        changed = mentee.model_copy(update={
            "buddy_id": OTHER_BUDDY_ID,
            "home_university": "Sapienza",
            "agreement_end_date": date.today() + timedelta(days=30),
        })
        await self.service.update_mentee(db_session, changed)

        fetched = await self.service.get_mentee_by_id(db_session, mentee.id)
        assert fetched == changed
        assert await self.service.get_mentee_count(db_session, BUDDY_ID) == 0


class TestNotes:

    def setup_method(self):
        self.service = MenteeService()

    @pytest.mark.asyncio
    async def test_create_and_list_notes(self, db_session, make_mentee):
        mentee = await make_mentee(BUDDY_ID)
        first = await self.service.create_note(db_session, mentee.id, "Sent welcome email", BUDDY_ID)
        second = await self.service.create_note(db_session, mentee.id, "Met at the airport", BUDDY_ID)

        notes = await self.service.get_notes_of_mentee(db_session, mentee.id)
        assert [n.id for n in notes] == [first.id, second.id]
        assert first.author_id == BUDDY_ID
        assert first.updated_at is None

    @pytest.mark.asyncio
    async def test_notes_are_scoped_to_their_mentee(self, db_session, make_mentee):
        one = await make_mentee(BUDDY_ID, "one@uni.example.org")
        two = await make_mentee(BUDDY_ID, "two@uni.example.org")
        await self.service.create_note(db_session, one.id, "About one", BUDDY_ID)

        assert await self.service.get_notes_of_mentee(db_session, two.id) == []
        assert await self.service.get_notes_of_mentee(db_session, one.id) != []

    @pytest.mark.asyncio
    async def test_update_note_stamps_updated_at(self, db_session, make_mentee):
        mentee = await make_mentee(BUDDY_ID)
        note = await self.service.create_note(db_session, mentee.id, "Draft", BUDDY_ID)

        updated = await self.service.update_note(db_session, mentee.id, note.id, "Final")
        assert updated.content == "Final"
        assert updated.updated_at is not None
        assert updated.author_id == note.author_id

    @pytest.mark.asyncio
    async def test_update_missing_note(self, db_session, make_mentee):
        mentee = await make_mentee(BUDDY_ID)
        assert await self.service.update_note(db_session, mentee.id, "ghost", "text") is None

    @pytest.mark.asyncio
    async def test_delete_note(self, db_session, make_mentee):
        mentee = await make_mentee(BUDDY_ID)
        note = await self.service.create_note(db_session, mentee.id, "Oops", BUDDY_ID)

        await self.service.delete_note(db_session, mentee.id, note.id)
        assert await self.service.get_note(db_session, mentee.id, note.id) is None
        assert await self.service.get_mentee_by_id(db_session, mentee.id) is not None


class TestDeleteMentee:

    def setup_method(self):
        self.service = MenteeService()

    @pytest.mark.asyncio
    async def test_delete_cascades_to_notes(self, db_session, make_mentee):
        doomed = await make_mentee(BUDDY_ID, "doomed@uni.example.org")
        kept = await make_mentee(BUDDY_ID, "kept@uni.example.org")
        for text in ("one", "two", "three"):
            await self.service.create_note(db_session, doomed.id, text, BUDDY_ID)
        kept_note = await self.service.create_note(db_session, kept.id, "stays", BUDDY_ID)

        await self.service.delete_mentee(db_session, doomed.id)

        remaining = await db_session.execute(
            select(func.count()).select_from(MenteeItem).where(MenteeItem.pk == f"Mentee#{doomed.id}")
        )
        assert remaining.scalar() == 0
        assert await self.service.get_mentee_by_id(db_session, doomed.id) is None
        assert await self.service.get_note(db_session, kept.id, kept_note.id) is not None
        assert await self.service.get_mentee_count(db_session, BUDDY_ID) == 1
