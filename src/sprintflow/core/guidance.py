from dataclasses import dataclass, field
from typing import Optional, Tuple

from sprintflow.core.schedule import EventLabel


@dataclass(frozen=True)
class Guidance:
    title: str
    lead: str
    prompts: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {"title": self.title, "lead": self.lead, "prompts": list(self.prompts)}


INTENTION_GUIDANCE = Guidance(
    title="Set Your Intention",
    lead="Take a moment to:",
    prompts=(
        "Consider what you want to achieve in this sprint",
        "Write down your main goal",
        "Take a few deep breaths",
    ),
)

REFLECTION_GUIDANCE = Guidance(
    title="Reflect on Your Sprint",
    lead="Consider:",
    prompts=(
        "What did you accomplish?",
        "What challenges did you face?",
        "What will you focus on in the next sprint?",
    ),
)

BREAK_GUIDANCE = Guidance(
    title="Take a Break",
    lead="Remember to:",
    prompts=(
        "Stand up and stretch",
        "Rest your eyes",
        "Take a few deep breaths",
    ),
)

# Exact label matches; anything containing "Break" falls back to BREAK_GUIDANCE
GUIDANCE_BY_LABEL = {
    EventLabel.INTENTION_SETTING.value: INTENTION_GUIDANCE,
    EventLabel.REFLECTION.value: REFLECTION_GUIDANCE,
}


def guidance_for(label) -> Optional[Guidance]:
    """Returns the prompt card for a phase label, or None for phases without one."""
    if label is None:
        return None
    text = label.value if isinstance(label, EventLabel) else str(label)
    if text in GUIDANCE_BY_LABEL:
        return GUIDANCE_BY_LABEL[text]
    if "Break" in text:
        return BREAK_GUIDANCE
    return None
