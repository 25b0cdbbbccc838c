"""Unit tests for phase guidance lookup."""

from sprintflow.core.guidance import (
    BREAK_GUIDANCE,
    INTENTION_GUIDANCE,
    REFLECTION_GUIDANCE,
    guidance_for,
)
from sprintflow.core.schedule import EventLabel


class TestGuidanceFor:
    """Tests for guidance_for."""

    def test_exact_matches(self):
        """Test that intention and reflection are matched by label."""
        assert guidance_for(EventLabel.INTENTION_SETTING) is INTENTION_GUIDANCE
        assert guidance_for("Reflection") is REFLECTION_GUIDANCE

    def test_breaks_match_by_substring(self):
        """Test that any label containing 'Break' gets the break card."""
        assert guidance_for(EventLabel.REGULAR_BREAK) is BREAK_GUIDANCE
        assert guidance_for(EventLabel.LONGER_BREAK) is BREAK_GUIDANCE
        assert guidance_for("Coffee Break") is BREAK_GUIDANCE

    def test_phases_without_guidance(self):
        """Test that sprint, end and unknown labels have no card."""
        assert guidance_for(EventLabel.SPRINT) is None
        assert guidance_for(EventLabel.END) is None
        assert guidance_for("Reflection time") is None
        assert guidance_for(None) is None

    def test_to_dict(self):
        """Test the serialised card."""
        card = INTENTION_GUIDANCE.to_dict()

        assert card["title"] == "Set Your Intention"
        assert card["lead"] == "Take a moment to:"
        assert len(card["prompts"]) == 3
