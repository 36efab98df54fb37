# ABOUTME: Unit tests for the in-process cue router.
# ABOUTME: Validates fan-out, cue-type filtering, failure isolation, unsubscribe and the bounded cue log.

import pytest

from scaffold.models.cues import CueEvent, CueType
from scaffold.orchestration.cue_router import CueRouter
from tests.helpers import CueRecorder


@pytest.fixture
def make_cue(fixed_timestamp):
    """Factory for cue events"""
    def _make(cue: CueType, turn_number: int = 1) -> CueEvent:
        return CueEvent(cue=cue, timestamp=fixed_timestamp, turn_number=turn_number)
    return _make


class TestCueRouter:
    """Test suite for CueRouter"""

    def test_routes_to_all_subscribers(self, make_cue):
        """Test that every subscriber receives the cue"""
        router = CueRouter()
        first, second = CueRecorder(), CueRecorder()
        router.subscribe(first)
        router.subscribe(second)

        result = router.route_cue(make_cue(CueType.TURN_START))

        assert result == {"success": True, "recipients_count": 2}
        assert first.cues == ["turn_start"]
        assert second.cues == ["turn_start"]

    def test_filters_by_cue_type(self, make_cue):
        """Test that filtered subscribers only receive their cue types"""
        router = CueRouter()
        voice = CueRecorder()
        router.subscribe(voice, {CueType.INSTRUCTION_VOICE})

        router.route_cue(make_cue(CueType.TURN_START))
        router.route_cue(make_cue(CueType.INSTRUCTION_VOICE))

        assert voice.cues == ["instruction_voice"]

    def test_failing_handler_does_not_block_others(self, make_cue):
        """Test that one broken subscriber is isolated"""
        router = CueRouter()
        recorder = CueRecorder()

        def broken(event: CueEvent) -> None:
            raise RuntimeError("speaker unplugged")

        router.subscribe(broken)
        router.subscribe(recorder)

        result = router.route_cue(make_cue(CueType.TIMEOUT))

        assert result["recipients_count"] == 1
        assert recorder.cues == ["timeout"]

    def test_unsubscribe(self, make_cue):
        """Test that unsubscribed handlers stop receiving cues"""
        router = CueRouter()
        recorder = CueRecorder()
        router.subscribe(recorder)
        router.unsubscribe(recorder)

        router.route_cue(make_cue(CueType.GAME_OVER))
        assert recorder.cues == []

    def test_unsubscribe_unknown_handler(self):
        """Test that removing an unknown handler raises ValueError"""
        with pytest.raises(ValueError, match="not subscribed"):
            CueRouter().unsubscribe(CueRecorder())

    def test_recent_cues_bounded(self, make_cue):
        """Test that the cue log keeps only the newest entries"""
        router = CueRouter(history_size=3)
        for turn in range(1, 6):
            router.route_cue(make_cue(CueType.TURN_START, turn_number=turn))

        assert [e.turn_number for e in router.recent_cues] == [3, 4, 5]

    def test_clear_history(self, make_cue):
        """Test forgetting recorded cues"""
        router = CueRouter()
        router.route_cue(make_cue(CueType.COUNTDOWN))
        router.clear_history()
        assert router.recent_cues == []
