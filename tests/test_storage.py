"""Tests for the in-memory entity store."""

import random

import pytest

from storage import GangMember, MemoryStorage


class TestOrdering:
    def test_lists_are_newest_first(self, storage, clock):
        first = storage.create_ticket("a", "m", "1")
        clock.advance(10)
        second = storage.create_ticket("b", "m", "1")
        clock.advance(10)
        third = storage.create_ticket("c", "m", "1")

        ids = [t.id for t in storage.list_tickets()]
        assert ids == [third.id, second.id, first.id]

    def test_equal_timestamps_list_later_insert_first(self, storage):
        first = storage.create_note("a", "x")
        second = storage.create_note("b", "y")

        assert [n.id for n in storage.list_notes()] == [second.id, first.id]

    def test_messages_are_ascending_regardless_of_insertion(self, storage, clock):
        ticket = storage.create_ticket("a", "m", "1")
        clock.advance(50)
        late = storage.create_message(ticket.id, "late", "user")
        clock.current -= 30
        early = storage.create_message(ticket.id, "early", "staff")

        thread = storage.list_messages(ticket.id)
        assert [m.id for m in thread] == [early.id, late.id]

    def test_messages_are_scoped_to_ticket(self, storage):
        one = storage.create_ticket("a", "m", "1")
        two = storage.create_ticket("b", "m", "1")
        storage.create_message(one.id, "hi", "user")

        assert storage.list_messages(two.id) == []

    def test_deleting_ticket_drops_its_thread(self, storage):
        doomed = storage.create_ticket("a", "m", "1")
        kept = storage.create_ticket("b", "m", "1")
        storage.create_message(doomed.id, "bye", "user")
        storage.create_message(kept.id, "hi", "user")

        assert storage.delete_ticket(doomed.id) is True

        assert storage.list_messages(doomed.id) == []
        assert [m.content for m in storage.list_messages(kept.id)] == ["hi"]
        assert storage.stats()["messages"] == 1


class TestCrudContract:
    def test_missing_ids_return_absence_markers(self, storage):
        assert storage.get_ticket("nope") is None
        assert storage.update_ticket("nope", {"status": "closed"}) is None
        assert storage.delete_ticket("nope") is False
        assert storage.add_gang_member("nope", GangMember("m", "u", "g", "Member", 0, True)) is None
        assert storage.remove_gang_member("nope", "m") is None
        assert storage.join_giveaway("nope", "u") is None
        assert storage.end_giveaway("nope") is None
        assert storage.mark_notification_read("nope") is None

    def test_create_ticket_sets_number_and_timestamp(self, storage, clock):
        ticket = storage.create_ticket("Help", "Stuck", "123")

        assert ticket.status == "open"
        assert len(ticket.ticket_number) == 5
        assert 10000 <= int(ticket.ticket_number) <= 99999
        assert ticket.created_at == clock.current
        assert ticket.claimed_by is None

    def test_partial_update_keeps_other_fields(self, storage):
        ticket = storage.create_ticket("Help", "Stuck", "123")

        updated = storage.update_ticket(ticket.id, {"claimed_by": "staff-1"})

        assert updated.claimed_by == "staff-1"
        assert updated.subject == "Help"
        assert updated.message == "Stuck"
        assert updated.status == "open"

    def test_update_ignores_immutable_fields(self, storage):
        ticket = storage.create_ticket("Help", "Stuck", "123")

        updated = storage.update_ticket(ticket.id, {"id": "other", "ticket_number": "1", "created_at": 0})

        assert updated.id == ticket.id
        assert updated.ticket_number == ticket.ticket_number
        assert updated.created_at == ticket.created_at

    def test_delete_reports_existence(self, storage):
        note = storage.create_note("t", "d")

        assert storage.delete_note(note.id) is True
        assert storage.delete_note(note.id) is False

    def test_returned_entities_are_copies(self, storage):
        gang = storage.create_gang("Reds", "u1", "Bob", "pw", "#FF0000")
        gang.members.append(GangMember("m", "intruder", gang.id, "Member", 0, True))
        gang.name = "Changed"

        stored = storage.get_gang(gang.id)
        assert stored.members == []
        assert stored.name == "Reds"


class TestGangs:
    def test_create_gang_seeds_default_ranks(self, storage):
        gang = storage.create_gang("Reds", "u1", "Bob", "pw", "#FF0000")

        assert gang.members == []
        assert [r.name for r in gang.ranks] == ["Member", "Officer"]
        assert all(r.gang_id == gang.id for r in gang.ranks)

    def test_remove_unknown_member_is_noop(self, storage):
        gang = storage.create_gang("Reds", "u1", "Bob", "pw", "#FF0000")
        storage.add_gang_member(gang.id, GangMember("m1", "alice", "", "Member", 0, True))

        result = storage.remove_gang_member(gang.id, "missing")

        assert [m.username for m in result.members] == ["alice"]

    def test_add_member_binds_gang_id(self, storage):
        gang = storage.create_gang("Reds", "u1", "Bob", "pw", "#FF0000")

        result = storage.add_gang_member(gang.id, GangMember("m1", "alice", "", "Member", 0, True))

        assert result.members[0].gang_id == gang.id


class TestGiveaways:
    def test_create_parses_duration(self, storage, clock):
        giveaway = storage.create_giveaway(100, "2d", "", 1)

        assert giveaway.ends_at == clock.current + 172_800_000
        assert giveaway.status == "active"
        assert giveaway.participants == []
        assert giveaway.winners == []

    def test_unparseable_duration_defaults_to_one_minute(self, storage, clock):
        giveaway = storage.create_giveaway(100, "abc", "", 1)

        assert giveaway.ends_at == clock.current + 60_000

    def test_join_is_idempotent(self, storage):
        giveaway = storage.create_giveaway(100, "1h", "", 1)

        storage.join_giveaway(giveaway.id, "alice")
        result = storage.join_giveaway(giveaway.id, "alice")

        assert result.participants == ["alice"]

    def test_leave_removes_user(self, storage):
        giveaway = storage.create_giveaway(100, "1h", "", 1)
        storage.join_giveaway(giveaway.id, "alice")
        storage.join_giveaway(giveaway.id, "bob")

        result = storage.leave_giveaway(giveaway.id, "alice")

        assert result.participants == ["bob"]

    def test_end_draws_min_of_slots_and_participants(self, storage):
        giveaway = storage.create_giveaway(100, "1h", "", 3)
        storage.join_giveaway(giveaway.id, "solo")

        ended = storage.end_giveaway(giveaway.id)

        assert ended.status == "ended"
        assert ended.winners == ["solo"]

    def test_end_with_no_participants_has_no_winners(self, storage):
        giveaway = storage.create_giveaway(100, "1h", "", 2)

        assert storage.end_giveaway(giveaway.id).winners == []

    def test_winners_are_never_redrawn(self, storage, clock):
        giveaway = storage.create_giveaway(100, "1m", "", 2)
        for name in ("a", "b", "c", "d", "e"):
            storage.join_giveaway(giveaway.id, name)

        first = storage.end_giveaway(giveaway.id).winners
        clock.advance(3_600_000)
        storage.list_giveaways()
        again = storage.end_giveaway(giveaway.id).winners

        assert again == first
        assert storage.get_giveaway(giveaway.id).winners == first

    def test_listing_expires_overdue_giveaways(self, storage, clock):
        giveaway = storage.create_giveaway(100, "1m", "", 1)
        storage.join_giveaway(giveaway.id, "alice")
        clock.advance(60_001)

        listed = storage.list_giveaways()

        assert listed[0].status == "ended"
        assert listed[0].winners == ["alice"]

    def test_giveaway_not_expired_before_deadline(self, storage, clock):
        storage.create_giveaway(100, "1m", "", 1)
        clock.advance(60_000)

        assert storage.list_giveaways()[0].status == "active"

    def test_expire_returns_only_newly_ended(self, storage, clock):
        due = storage.create_giveaway(100, "1m", "", 1)
        storage.create_giveaway(100, "1w", "", 1)
        clock.advance(120_000)

        ended = storage.expire_giveaways()

        assert [g.id for g in ended] == [due.id]
        assert storage.expire_giveaways() == []


class TestUsersAndSettings:
    def test_block_then_unblock_restores_state(self, storage):
        user = storage.create_user("123")

        storage.block_user(user.id)
        restored = storage.unblock_user(user.id)

        assert restored.is_blocked is False
        assert restored.user_id == user.user_id
        assert restored.created_at == user.created_at
        assert restored.id == user.id

    def test_lookup_by_external_id(self, storage):
        user = storage.create_user("123")

        assert storage.get_user_by_user_id("123").id == user.id
        assert storage.get_user_by_user_id("999") is None

    def test_mark_notification_read(self, storage):
        notification = storage.create_notification("update", "t", "d")

        assert notification.read is False
        assert storage.mark_notification_read(notification.id).read is True

    def test_clear_empties_every_collection(self, storage):
        storage.create_ticket("a", "b", "c")
        storage.create_gang("g", "o", "n", "p", "#000000")
        storage.create_user("1")
        storage.set_ai_enabled(False)

        storage.clear()

        assert all(count == 0 for count in storage.stats().values())
        assert set(storage.stats()) == set(MemoryStorage.COLLECTIONS)
        assert storage.get_ai_enabled() is True


@pytest.mark.parametrize("seed", [1, 2, 3])
def test_same_seed_draws_same_winners(clock, seed):
    results = []
    for _ in range(2):
        store = MemoryStorage(clock=clock, rng=random.Random(seed))
        giveaway = store.create_giveaway(1, "1h", "", 3)
        for name in ("a", "b", "c", "d"):
            store.join_giveaway(giveaway.id, name)
        results.append(store.end_giveaway(giveaway.id).winners)

    assert results[0] == results[1]
    assert len(results[0]) == 3
