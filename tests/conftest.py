import os
import sys
import json
import pytest
from unittest.mock import patch

# Ensure project packages can be imported
sys.path.append(os.getcwd())


@pytest.fixture(autouse=True)
def mock_pygame():
    """
    Global mock for pygame window/audio entry points to allow headless testing.
    Autoused for all tests to prevent accidental window creation.
    """
    with patch('pygame.init'), \
         patch('pygame.display'), \
         patch('pygame.mixer'), \
         patch('pygame.image'):
        yield


@pytest.fixture
def event_bus():
    """Fresh EventBus for each test."""
    from narratix_engine.core.events import EventBus
    return EventBus()


@pytest.fixture
def scheduler():
    """Fresh Scheduler for each test."""
    from narratix_engine.core.timer import Scheduler
    return Scheduler()


def make_char_oracle(max_chars):
    """Line-fit oracle where every character is one unit wide."""
    def fits_one_line(text):
        return len(text) <= max_chars
    return fits_one_line


@pytest.fixture
def char_oracle():
    """Fits lines of up to 20 characters."""
    return make_char_oracle(20)


@pytest.fixture
def recorded_events(event_bus):
    """List of (event type, data) for every overlay event published on event_bus."""
    from narratix_engine.core.events import OverlayEvent

    received = []
    for event_type in OverlayEvent:
        event_bus.subscribe(
            event_type,
            lambda e: received.append((e.type, dict(e.data))),
            weak=False,
        )
    return received


@pytest.fixture
def scripts_dir(tmp_path):
    """Directory with a small valid script (DEMO_1) and avatar files."""
    avatars = tmp_path / "avatars"
    avatars.mkdir()
    (avatars / "guide_neutral.png").write_bytes(b"")
    (avatars / "guide_happy.png").write_bytes(b"")

    dialogue = tmp_path / "dialogue"
    dialogue.mkdir()
    script = {
        "scriptId": "DEMO_1",
        "startAvatarResName": "guide_neutral",
        "messages": [
            {
                "text": "Hi [AVATAR=1] there",
                "highlightMap": {"there": "#FF0000"},
                "speed": 10,
                "avatars": ["guide_neutral", "guide_happy"],
            },
            {"text": "Bye"},
        ],
    }
    with open(dialogue / "demo_1.json", "w") as f:
        json.dump(script, f)

    return tmp_path
