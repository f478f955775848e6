"""Speech boundary.

A speaker is any callable taking the text to say. Synthesis itself is
someone else's job; edits only announce their result and move on.
"""

from collections import deque
from typing import Callable

import structlog

from bliss import config

logger = structlog.get_logger(__name__)

Speaker = Callable[[str], None]


class LoggingSpeaker:
    """Default speaker: records the announcement in the log.

    Keeps the most recent ``history`` announcements in ``spoken``.
    """

    def __init__(self, history=config.SPEECH_HISTORY):
        self.spoken = deque(maxlen=history)

    def __call__(self, text: str) -> None:
        self.spoken.append(text)
        logger.info("speak", text=text)


def safe_speak(speaker, text):
    """Fire-and-forget announcement. A failing speaker never fails the edit."""
    if speaker is None:
        return
    try:
        speaker(text)
    except Exception:
        logger.warning("speak_failed", text=text, exc_info=True)
