"""Static mood table for check-ins."""

from __future__ import annotations

from helpline.errors import ValidationError
from helpline.models import Mood

_PANCHAYTI = Mood(
    label="thokolo panchayti",
    emoji="\U0001f92d",
    default_message="I have a panchayti situation. I need you to hear me out.",
)

MOODS: dict[str, Mood] = {
    "happy": Mood(
        label="happy",
        emoji="\U0001f60a",
        default_message="I’m feeling happy and wanted to share it with you.",
    ),
    "sad": Mood(
        label="sad",
        emoji="\U0001f614",
        default_message="I’m feeling low right now. Please talk to me when free.",
    ),
    "stressed": Mood(
        label="stressed",
        emoji="\U0001f623",
        default_message="I’m feeling stressed. I need your calm voice.",
    ),
    "angry": Mood(
        label="angry",
        emoji="\U0001f620",
        default_message="I’m angry right now and need your support.",
    ),
    "thokolo panchayti": _PANCHAYTI,
    "thokolo-panchayti": _PANCHAYTI,
}


def valid_moods() -> list[str]:
    """Distinct mood labels in table order."""
    return list(dict.fromkeys(mood.label for mood in MOODS.values()))


def resolve_mood(mood: object) -> Mood:
    """Look up a mood key case-insensitively.

    Raises ValidationError listing the accepted moods when the key is
    missing or unknown.
    """
    key = str(mood or "").strip().lower()
    chosen = MOODS.get(key)
    if chosen is None:
        labels = valid_moods()
        raise ValidationError(
            f"Mood must be one of: {', '.join(labels)}.",
            validMoods=labels,
        )
    return chosen
