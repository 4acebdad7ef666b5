"""Unit tests for the roster/snapshot/overlay reconciler."""

from coachdesk.api.models import RosterMember
from coachdesk.reconcile import StatusBoard


def member(member_id, name=None):
	return RosterMember(id=member_id, name=name or member_id)


def attendance_board(context="2025-01-10"):
	return StatusBoard(lambda: "present", context=context)


def test_seed_gives_defaults_to_every_member():
	board = attendance_board()
	board.seed_roster([member("s1"), member("s2")])
	assert board.overlay() == {"s1": "present", "s2": "present"}
	assert len(board) == 2


def test_roster_reload_keeps_pending_edit():
	board = attendance_board()
	board.seed_roster([member("s1"), member("s2")])
	board.stage("s1", "absent")

	board.seed_roster([member("s1"), member("s2"), member("s3")])

	assert board.get("s1") == "absent"
	assert board.get("s3") == "present"
	assert board.is_touched("s1")


def test_merging_same_snapshot_twice_is_idempotent():
	board = attendance_board()
	board.seed_roster([member("s1"), member("s2"), member("s3")])
	snapshot = {"s1": "absent", "s2": "present"}

	board.merge_snapshot(snapshot)
	first = board.overlay()
	board.merge_snapshot(snapshot)

	assert board.overlay() == first
	assert first == {"s1": "absent", "s2": "present", "s3": "present"}


def test_snapshot_does_not_overwrite_touched_keys():
	board = attendance_board()
	board.seed_roster([member("s1"), member("s2")])
	board.stage("s1", "present")

	board.merge_snapshot({"s1": "absent", "s2": "absent"})

	assert board.get("s1") == "present"
	assert board.get("s2") == "absent"
	assert board.snapshot_value("s1") == "absent"


def test_committed_keys_take_server_values_again():
	board = attendance_board()
	board.seed_roster([member("s1")])
	board.stage("s1", "absent")
	board.mark_committed()

	board.merge_snapshot({"s1": "present"})

	assert board.get("s1") == "present"
	assert not board.has_pending_edits


def test_discard_restores_persisted_value():
	board = attendance_board()
	board.seed_roster([member("s1"), member("s2")])
	board.merge_snapshot({"s1": "present"})
	board.stage("s1", "absent")
	board.stage("s2", "absent")

	board.discard("s1")
	board.discard("s2")

	assert board.get("s1") == "present"
	assert board.get("s2") == "present"
	assert board.touched == set()


def test_change_context_drops_snapshot_and_edits():
	board = attendance_board()
	board.seed_roster([member("s1")])
	board.merge_snapshot({"s1": "absent"})
	board.stage("s1", "absent")

	board.change_context("2025-01-11")

	assert board.context == "2025-01-11"
	assert board.get("s1") == "present"
	assert board.snapshot_value("s1") is None
	assert not board.has_pending_edits


def test_committable_follows_roster_order_and_filter():
	board = StatusBoard(lambda: None)
	board.seed_roster([member("s2"), member("s1"), member("s3")])
	board.stage("s1", 10)
	board.stage("s2", 0)

	entries = board.committable(lambda value: value > 0)

	assert [(m.id, value) for m, value in entries] == [("s1", 10)]


def test_board_without_default_has_no_entries_for_new_members():
	board = StatusBoard(lambda: None)
	board.seed_roster([member("s1")])
	assert board.overlay() == {}
	assert board.get("s1") is None
	assert list(board) == [(board.roster[0], None)]


def test_snapshot_values_are_copied():
	board = StatusBoard(dict)
	board.seed_roster([member("s1")])
	record = {"marks": "40"}
	board.merge_snapshot({"s1": record})
	record["marks"] = "99"
	assert board.get("s1") == {"marks": "40"}
