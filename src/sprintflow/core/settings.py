"""Session configuration as entered by the user."""
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from sprintflow.core.schedule import SessionDurations
from sprintflow.utils.time_conversions import parse_hms

DURATION_FIELDS = (
    "session",
    "intention_setting",
    "sprint",
    "reflection",
    "regular_break",
    "longer_break",
    "bell",
)


class SessionSettings(BaseModel):
    """Durations as 'HH:MM:SS' strings, plus the pass-through sound toggle."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "session": "01:00:00",
                "intentionSetting": "00:05:00",
                "sprint": "00:20:00",
                "reflection": "00:05:00",
                "regularBreak": "00:05:00",
                "longerBreak": "00:20:00",
                "bell": "00:05:00",
                "backgroundSound": False,
            }
        },
    )

    session: str = "01:00:00"
    intention_setting: str = Field(default="00:05:00", alias="intentionSetting")
    sprint: str = "00:20:00"
    reflection: str = "00:05:00"
    regular_break: str = Field(default="00:05:00", alias="regularBreak")
    longer_break: str = Field(default="00:20:00", alias="longerBreak")
    # Bell interval and background drone are carried for the display layer only
    bell: str = "00:05:00"
    background_sound: bool = Field(default=False, alias="backgroundSound")

    @field_validator(*DURATION_FIELDS)
    @classmethod
    def _check_hms(cls, value: str) -> str:
        parse_hms(value)
        return value.strip()

    @model_validator(mode="after")
    def _check_cycle(self) -> "SessionSettings":
        durations = self.to_durations()
        if durations.session > 0 and durations.sprint_cycle == 0:
            raise ValueError("Intention setting, sprint and reflection cannot all be zero.")
        return self

    def seconds(self, field_name: str) -> int:
        return parse_hms(getattr(self, field_name))

    def to_durations(self) -> SessionDurations:
        return SessionDurations(
            session=self.seconds("session"),
            intention_setting=self.seconds("intention_setting"),
            sprint=self.seconds("sprint"),
            reflection=self.seconds("reflection"),
            regular_break=self.seconds("regular_break"),
            longer_break=self.seconds("longer_break"),
        )
