"""Tests for layer sequencing and full playthroughs."""

import pytest

from packetjourney.challenges.engine import ChallengeState
from packetjourney.challenges.types import GradingResult
from packetjourney.errors import ChallengeValidationError
from packetjourney.quests.playthrough import QuestPlaythrough
from packetjourney.quests.sequencer import LayerSequencer
from packetjourney.storage.progress import LayerStatus


class TestLayerSequencer:
    def test_starts_on_first_layer(self, two_layer_quest, tracker, player):
        sequencer = LayerSequencer(two_layer_quest, tracker, player)

        assert sequencer.current_index == 0
        assert sequencer.current_layer() is two_layer_quest.layers[0]
        assert sequencer.is_complete() is False

    def test_advance_rejected_until_layer_passed(self, two_layer_quest, tracker, player):
        sequencer = LayerSequencer(two_layer_quest, tracker, player)

        assert sequencer.advance() is False
        tracker.record_outcome(player, two_layer_quest.id, 0, GradingResult(correct=False, answer_given="POST"))
        assert sequencer.advance() is False
        assert sequencer.current_index == 0

    def test_advance_through_to_completion(self, two_layer_quest, tracker, player):
        sequencer = LayerSequencer(two_layer_quest, tracker, player)

        tracker.record_outcome(player, two_layer_quest.id, 0, GradingResult(correct=True, answer_given="GET"))
        assert sequencer.advance() is True
        assert sequencer.current_index == 1

        tracker.record_outcome(player, two_layer_quest.id, 1, GradingResult(correct=True, answer_given=404))
        assert sequencer.advance() is True
        assert sequencer.is_complete() is True
        assert sequencer.current_layer() is None
        assert sequencer.advance() is False

    def test_resume_skips_completed_layers(self, two_layer_quest, tracker, player):
        tracker.record_outcome(player, two_layer_quest.id, 0, GradingResult(correct=True, answer_given="GET"))
        sequencer = LayerSequencer(two_layer_quest, tracker, player)

        sequencer.resume()

        assert sequencer.current_index == 1

    def test_resume_on_finished_quest(self, single_layer_quest, tracker, player):
        tracker.record_outcome(player, single_layer_quest.id, 0, GradingResult(correct=True, answer_given="/api/hello"))
        sequencer = LayerSequencer(single_layer_quest, tracker, player)

        sequencer.resume()

        assert sequencer.is_complete() is True


class TestQuestPlaythrough:
    def test_wrong_then_right_on_two_layer_quest(self, two_layer_quest, tracker, player):
        play = QuestPlaythrough(two_layer_quest, player, tracker)

        play.select("POST")
        result = play.submit()
        assert result.correct is False
        assert play.status() == {0: LayerStatus.UNLOCKED, 1: LayerStatus.LOCKED}
        assert play.advance() is False

        play.retry()
        assert play.runtime.state == ChallengeState.UNANSWERED
        play.select("GET")
        assert play.submit().correct is True
        assert play.status() == {0: LayerStatus.COMPLETED, 1: LayerStatus.UNLOCKED}

        assert play.advance() is True
        assert play.layer.index == 1
        assert play.runtime.state == ChallengeState.UNANSWERED

        play.select(404)
        assert play.submit().correct is True
        assert play.advance() is True
        assert play.is_complete() is True
        assert play.summary().complete is True

    def test_guest_completes_single_layer_quest(self, single_layer_quest, tracker, guest):
        play = QuestPlaythrough(single_layer_quest, guest, tracker)

        play.select("/api/hello")
        play.submit()

        assert play.advance() is True
        assert play.is_complete() is True
        assert play.runtime is None
        assert play.submit() is None
        assert play.select("/api/hello") is False
        assert play.advance() is False

    def test_resubmit_after_completion_only_updates_latest(self, two_layer_quest, tracker, player):
        play = QuestPlaythrough(two_layer_quest, player, tracker)
        play.select("GET")
        play.submit()

        play.retry()
        play.select("DELETE")
        play.submit()

        record = tracker.get_record(player, two_layer_quest.id, 0)
        assert record.completed is True
        assert record.latest.correct is False
        assert play.advance() is True

    def test_new_playthrough_resumes_from_tracker(self, two_layer_quest, tracker, player):
        first = QuestPlaythrough(two_layer_quest, player, tracker)
        first.select("GET")
        first.submit()

        second = QuestPlaythrough(two_layer_quest, player, tracker)

        assert second.layer.index == 1


def test_submit_without_selection_records_nothing(two_layer_quest, tracker, player):
    play = QuestPlaythrough(two_layer_quest, player, tracker)

    with pytest.raises(ChallengeValidationError):
        play.submit()

    assert play.runtime.state == ChallengeState.UNANSWERED
    assert tracker.get_record(player, two_layer_quest.id, 0).attempts == 0
