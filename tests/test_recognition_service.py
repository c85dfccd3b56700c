"""
tests/test_recognition_service.py — Recognition Orchestration Tests
=====================================================================

End-to-end behaviour of ``create_recognition`` and the social actions over
an in-memory state.  Rejections must leave the state object untouched.
"""

from __future__ import annotations

import json
from dataclasses import replace
from datetime import datetime, timedelta

from toastx.config import AntiGamingLimits, ToastXConfig
from toastx.constants import DAILY_LIMIT_QUICK_TOAST, MONTHLY_CAP_REACHED
from toastx.database.models import (
    AwardType,
    CompanyValue,
    LeaderboardTimeframe,
    LeaderboardType,
    MilestoneBadge,
    NotificationType,
    ReactionType,
    RecognitionType,
)
from toastx.services import recognition_service as svc
from toastx.services.leaderboard_service import get_leaderboard, get_stats
from toastx.store import notifications as notif_store
from toastx.store import recognitions as rec_store
from toastx.store.snapshot import state_from_dict, state_to_dict
from toastx.store.state import RecentRecipient

QT = RecognitionType.QUICK_TOAST
SO = RecognitionType.STANDING_OVATION
TT = RecognitionType.TEAM_TOAST

OVATION_MESSAGE = (
    "Your migration plan kept three teams unblocked through a very rough release week."
)


def _quick(*recipients, message="Thanks for the quick review today!", **kwargs):
    return svc.CreateRecognitionInput(
        type=QT,
        recipient_ids=tuple(recipients),
        value=CompanyValue.BE_ALL_IN,
        message=message,
        **kwargs,
    )


def _ovation(*recipients, areas=("Cloud Infrastructure",), **kwargs):
    return svc.CreateRecognitionInput(
        type=SO,
        recipient_ids=tuple(recipients),
        value=CompanyValue.OWN_THE_OUTCOME,
        message=OVATION_MESSAGE,
        expert_areas=tuple(areas),
        **kwargs,
    )


class TestCreateRecognition:
    def test_quick_toast_applies_everything(self, state, now):
        new, result = svc.create_recognition(state, "alice", _quick("bob"), now=now)
        assert result.success
        assert result.credits == {"bob": 5}

        alice, bob = new.users["alice"], new.users["bob"]
        assert alice.credits == 2
        assert alice.recognitions_given == 1
        assert alice.daily_quick_toasts == 1
        assert alice.recent_entry("bob").last_recognized_at == now
        assert alice.last_active_at == now
        assert bob.credits == 5
        assert bob.recognitions_received == 1
        assert bob.values_counts == {CompanyValue.BE_ALL_IN: 1}
        assert bob.recent_entry("alice").credits_from_this_month == 5

        rec = new.recognitions[0]
        assert rec.id == result.recognition_id
        assert rec.id.startswith("rec-")
        assert rec.recipients[0].name == "Bob"

    def test_first_recognition_awards_badges(self, state, now):
        new, result = svc.create_recognition(state, "alice", _quick("bob"), now=now)
        assert result.new_badges == {
            "alice": (MilestoneBadge.TOAST_DEBUT,),
            "bob": (MilestoneBadge.FIRST_TOAST,),
        }
        debut = notif_store.notifications_by_type(new, "alice", NotificationType.BADGE_EARNED)
        assert debut[0].message.startswith('You earned the "Toast Debut" badge!')

    def test_recipient_is_notified(self, state, now):
        new, result = svc.create_recognition(state, "alice", _quick("bob"), now=now)
        (note,) = notif_store.notifications_by_type(new, "bob", NotificationType.RECOGNIZED)
        assert note.message == "Alice recognized you for be all in!"
        assert note.recognition_id == result.recognition_id

    def test_standing_ovation_boosts_and_awards(self, state, now):
        data = _ovation("bob", award=AwardType.OWNER)
        new, result = svc.create_recognition(state, "alice", data, now=now)
        assert result.credits == {"bob": 85}  # 25 + 10 + 50

        bob = new.users["bob"]
        (area,) = bob.expert_areas
        assert area.id == "cloud-infrastructure"
        assert area.score == 10
        assert bob.earned_awards[0].award == AwardType.OWNER
        assert notif_store.notifications_by_type(new, "bob", NotificationType.AWARD_EARNED)

    def test_team_toast_credits_every_member(self, state, now):
        data = svc.CreateRecognitionInput(
            type=TT,
            recipient_ids=("bob", "carol", "dave"),
            value=CompanyValue.DO_THE_RIGHT_THING,
            message="What a launch week from the whole crew!",
        )
        new, result = svc.create_recognition(state, "alice", data, now=now)
        assert result.credits == {"bob": 15, "carol": 15, "dave": 15}
        assert new.users["alice"].credits == 3
        assert new.users["alice"].daily_quick_toasts == 0

    def test_fourth_quick_toast_rejected(self, state, now):
        s = state
        for rid in ("bob", "carol", "dave"):
            s, result = svc.create_recognition(s, "alice", _quick(rid), now=now)
            assert result.success

        new, result = svc.create_recognition(s, "alice", _quick("erin"), now=now)
        assert new is s
        assert not result.success
        assert result.error == DAILY_LIMIT_QUICK_TOAST[0]
        check = svc.check_recognition(s, "alice", ["erin"], QT, now=now)
        assert check.remaining == 0

    def test_cooldown_rejection(self, state, now):
        s, _ = svc.create_recognition(state, "alice", _quick("bob"), now=now - timedelta(hours=23))
        new, result = svc.create_recognition(s, "alice", _quick("bob"), now=now)
        assert new is s
        assert result.cooldown_ends_at == now + timedelta(hours=1)
        assert result.suggested_action

    def test_monthly_cap_gate(self, state, now):
        bob = replace(
            state.users["bob"],
            recent_recipients=(RecentRecipient("alice", credits_from_this_month=500, month="2026-02"),),
        )
        s = replace(state, users={**state.users, "bob": bob})
        new, result = svc.create_recognition(s, "alice", _quick("bob"), now=now)
        assert new is s
        assert result.error == MONTHLY_CAP_REACHED[0]

    def test_monthly_cap_clamps_credits(self, state, now):
        bob = replace(
            state.users["bob"],
            recent_recipients=(RecentRecipient("alice", credits_from_this_month=490, month="2026-02"),),
        )
        s = replace(state, users={**state.users, "bob": bob})
        new, result = svc.create_recognition(s, "alice", _ovation("bob"), now=now)
        assert result.credits == {"bob": 10}
        assert new.users["bob"].recent_entry("alice").credits_from_this_month == 500

    def test_reciprocal_halves_recipient_credits(self, state, now):
        s, _ = svc.create_recognition(state, "bob", _quick("alice"), now=now - timedelta(hours=10))
        new, result = svc.create_recognition(s, "alice", _quick("bob"), now=now)
        assert result.credits == {"bob": 3}
        assert new.users["alice"].credits == 5 + 2

    def test_validation_failures_leave_state(self, state, now):
        cases = [
            (_quick("alice"), "yourself"),
            (_quick("ghost"), "Recipient not found"),
            (_quick("bob", message="ty"), "at least 10"),
            (_ovation("bob", areas=()), "expert area"),
        ]
        for data, fragment in cases:
            new, result = svc.create_recognition(state, "alice", data, now=now)
            assert new is state
            assert fragment in result.error

    def test_unknown_giver(self, state, now):
        new, result = svc.create_recognition(state, "ghost", _quick("bob"), now=now)
        assert new is state
        assert result.error == "User not found"

    def test_admin_mode_lifts_limits(self, state, now):
        cfg = ToastXConfig(admin_mode=True, limits=AntiGamingLimits.unlimited())
        s = state
        for _ in range(5):
            s, result = svc.create_recognition(s, "alice", _quick("bob"), now=now, config=cfg)
            assert result.success
        assert s.users["bob"].recognitions_received == 5

    def test_gratitude_chain_depth(self, state, now):
        s, first = svc.create_recognition(state, "alice", _quick("bob"), now=now)
        s, second = svc.create_recognition(
            s, "bob", _quick("carol", chain_parent_id=first.recognition_id), now=now
        )
        assert rec_store.get_recognition(s, second.recognition_id).chain_depth == 1
        s, orphan = svc.create_recognition(
            s, "carol", _quick("dave", chain_parent_id="rec-missing"), now=now
        )
        assert rec_store.get_recognition(s, orphan.recognition_id).chain_depth == 1

    def test_message_is_sanitized(self, state, now):
        new, _ = svc.create_recognition(
            state, "alice", _quick("bob", message="  Thanks   for\n\nthe help!  "), now=now
        )
        assert new.recognitions[0].message == "Thanks for the help!"


class TestSocialActions:
    def _with_recognition(self, state, now):
        s, result = svc.create_recognition(state, "alice", _quick("bob"), now=now)
        return s, result.recognition_id

    def test_react_notifies_other_participants(self, state, now):
        s, rid = self._with_recognition(state, now)
        new, result = svc.react(s, rid, "carol", ReactionType.FIRE, now=now)
        assert result.success
        assert len(notif_store.notifications_by_type(new, "alice", NotificationType.REACTION)) == 1
        assert len(notif_store.notifications_by_type(new, "bob", NotificationType.REACTION)) == 1

    def test_duplicate_reaction_rejected(self, state, now):
        s, rid = self._with_recognition(state, now)
        s, _ = svc.react(s, rid, "carol", ReactionType.FIRE, now=now)
        new, result = svc.react(s, rid, "carol", ReactionType.FIRE, now=now)
        assert new is s
        assert result.error == "Already reacted"

    def test_unreact(self, state, now):
        s, rid = self._with_recognition(state, now)
        s, _ = svc.react(s, rid, "carol", ReactionType.LOVE, now=now)
        s, result = svc.unreact(s, rid, "carol", ReactionType.LOVE)
        assert result.success
        assert rec_store.get_recognition(s, rid).reactions == ()
        _, again = svc.unreact(s, rid, "carol", ReactionType.LOVE)
        assert again.error == "Reaction not found"

    def test_comment_with_mention(self, state, now):
        s, rid = self._with_recognition(state, now)
        new, result = svc.comment(s, rid, "carol", "Well deserved!", mentions=["dave"], now=now)
        assert result.id.startswith("comment-")
        assert notif_store.notifications_by_type(new, "dave", NotificationType.MENTION)
        assert notif_store.notifications_by_type(new, "alice", NotificationType.COMMENT)
        assert not notif_store.notifications_by_type(new, "carol", NotificationType.COMMENT)

    def test_comment_rules(self, state, now):
        s, rid = self._with_recognition(state, now)
        assert svc.comment(s, rid, "carol", "   ", now=now)[1].error == "Comment cannot be empty"
        assert "at most" in svc.comment(s, rid, "carol", "x" * 1001, now=now)[1].error
        assert svc.comment(s, rid, "carol", "hi", parent_id="nope", now=now)[1].error == (
            "Parent comment not found"
        )

    def test_only_author_edits_or_deletes(self, state, now):
        s, rid = self._with_recognition(state, now)
        s, created = svc.comment(s, rid, "carol", "Nice!", now=now)
        new, result = svc.edit_comment(s, rid, created.id, "dave", "Hijack")
        assert new is s
        assert not result.success

        s, result = svc.edit_comment(s, rid, created.id, "carol", "Very nice!", now=now)
        comment = rec_store.get_recognition(s, rid).comments[0]
        assert comment.content == "Very nice!"
        assert comment.updated_at == now

        s, result = svc.remove_comment(s, rid, created.id, "carol")
        assert result.success
        assert rec_store.get_recognition(s, rid).comments == ()

    def test_edit_respects_length_limit(self, state, now):
        s, rid = self._with_recognition(state, now)
        s, created = svc.comment(s, rid, "carol", "Nice!", now=now)
        new, result = svc.edit_comment(s, rid, created.id, "carol", "x" * 1001, now=now)
        assert new is s
        assert "at most" in result.error
        assert rec_store.get_recognition(s, rid).comments[0].content == "Nice!"

    def test_repost_and_bookmark(self, state, now):
        s, rid = self._with_recognition(state, now)
        s, _ = svc.repost(s, rid)
        s, _ = svc.bookmark(s, rid)
        rec = rec_store.get_recognition(s, rid)
        assert (rec.reposts, rec.bookmarks) == (1, 1)
        assert svc.repost(s, "missing")[1].error == "Recognition not found"


class TestNotificationActions:
    def test_ownership_is_enforced(self, state, now):
        s, _ = svc.create_recognition(state, "alice", _quick("bob"), now=now)
        (note,) = notif_store.notifications_by_type(s, "bob", NotificationType.RECOGNIZED)

        new, result = svc.mark_notification_read(s, note.id, "carol")
        assert new is s
        assert result.error == "Notification not found"

        s, result = svc.mark_notification_read(s, note.id, "bob")
        assert result.success
        assert notif_store.unread_count(s, "bob") == 1  # the badge notice

    def test_mark_all_and_clear(self, state, now):
        s, _ = svc.create_recognition(state, "alice", _quick("bob"), now=now)
        s, _ = svc.mark_all_read(s, "bob")
        assert notif_store.unread_count(s, "bob") == 0
        assert notif_store.unread_count(s, "alice") == 1

        s, _ = svc.clear_notifications(s, "bob")
        assert notif_store.notifications_for(s, "bob") == []
        assert notif_store.notifications_for(s, "alice")


class TestNaiveTimestamps:
    NAIVE_NOW = datetime(2026, 2, 18, 15, 0)

    def test_naive_now_is_stored_as_utc(self, state, now):
        new, result = svc.create_recognition(state, "alice", _quick("bob"), now=self.NAIVE_NOW)
        assert result.success
        rec = rec_store.get_recognition(new, result.recognition_id)
        assert rec.created_at.tzinfo is not None
        assert rec.created_at == now
        entry = next(r for r in new.users["alice"].recent_recipients if r.user_id == "bob")
        assert entry.last_recognized_at == now

    def test_naive_now_keeps_leaderboard_and_snapshot_working(self, state):
        new, _ = svc.create_recognition(state, "alice", _quick("bob"), now=self.NAIVE_NOW)
        entries = get_leaderboard(
            new, LeaderboardType.MOST_RECOGNIZED, LeaderboardTimeframe.THIS_WEEK, now=self.NAIVE_NOW
        )
        assert [(e.user_id, e.score) for e in entries] == [("bob", 1)]
        assert get_stats(new, now=self.NAIVE_NOW).this_week == 1
        restored = state_from_dict(json.loads(json.dumps(state_to_dict(new))))
        assert restored == new
