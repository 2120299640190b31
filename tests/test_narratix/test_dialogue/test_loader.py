"""Tests for script loading."""

import json
import pytest

from narratix.dialogue.errors import ScriptLoadError
from narratix.dialogue.loader import AvatarResolver, ScriptLoader, parse_color
from narratix.dialogue.models import NO_AVATAR


@pytest.fixture
def loader(scripts_dir):
    return ScriptLoader(scripts_dir / "dialogue", AvatarResolver(scripts_dir / "avatars"))


def write_script(scripts_dir, name, data):
    with open(scripts_dir / "dialogue" / f"{name}.json", "w") as f:
        json.dump(data, f)


def test_load_maps_raw_script(loader, scripts_dir):
    script = loader.load("DEMO_1")

    assert script.script_id == "DEMO_1"
    assert script.default_avatar == str(scripts_dir / "avatars" / "guide_neutral.png")
    assert len(script.messages) == 2

    first = script.messages[0]
    assert first.text == "Hi [AVATAR=1] there"
    assert first.reveal_speed_ms == 10
    assert first.highlight_map == {"there": (255, 0, 0, 255)}
    assert first.avatar_variants[1].endswith("guide_happy.png")


def test_defaults_for_optional_fields(loader):
    second = loader.load("DEMO_1").messages[1]

    assert second.reveal_speed_ms == 30
    assert second.highlight_map == {}
    assert second.avatar_variants == ()


def test_default_speed_is_configurable(scripts_dir):
    loader = ScriptLoader(scripts_dir / "dialogue", default_speed_ms=50)

    assert loader.load("DEMO_1").messages[1].reveal_speed_ms == 50


def test_scripts_are_cached(loader):
    assert loader.load("DEMO_1") is loader.load("DEMO_1")


def test_unknown_script_raises(loader):
    with pytest.raises(ScriptLoadError) as info:
        loader.load("MISSING")

    assert info.value.script_id == "MISSING"


@pytest.mark.parametrize("script_id", ["../demo_1", "dialogue/demo_1", "..", ""])
def test_script_id_cannot_leave_scripts_dir(scripts_dir, script_id):
    # A valid script one level up must stay unreachable
    write_script(scripts_dir, "../demo_1", {"scriptId": "X", "startAvatarResName": "", "messages": []})
    loader = ScriptLoader(scripts_dir / "dialogue", AvatarResolver(scripts_dir / "avatars"))

    with pytest.raises(ScriptLoadError) as info:
        loader.load(script_id)

    assert "plain file stem" in info.value.reason


def test_bad_json_raises(loader, scripts_dir):
    (scripts_dir / "dialogue" / "broken.json").write_text("{not json")

    with pytest.raises(ScriptLoadError):
        loader.load("broken")


def test_schema_violation_raises(loader, scripts_dir):
    write_script(scripts_dir, "invalid", {"scriptId": "INVALID", "messages": []})

    with pytest.raises(ScriptLoadError) as info:
        loader.load("invalid")

    assert "startAvatarResName" in info.value.reason


def test_negative_speed_is_rejected(loader, scripts_dir):
    write_script(scripts_dir, "fast", {
        "scriptId": "FAST",
        "startAvatarResName": "",
        "messages": [{"text": "hi", "speed": -1}],
    })

    with pytest.raises(ScriptLoadError):
        loader.load("fast")


def test_bad_color_is_dropped(loader, scripts_dir):
    write_script(scripts_dir, "colors", {
        "scriptId": "COLORS",
        "startAvatarResName": "",
        "messages": [{"text": "hi", "highlightMap": {"good": "#00FF00", "bad": "#nothex"}}],
    })

    message = loader.load("colors").messages[0]

    assert message.highlight_map == {"good": (0, 255, 0, 255)}


def test_unknown_avatar_resolves_to_no_avatar(scripts_dir):
    resolver = AvatarResolver(scripts_dir / "avatars")

    assert resolver.resolve("ghost") == NO_AVATAR
    assert resolver.resolve("") == NO_AVATAR
    assert resolver.resolve("guide_happy").endswith("guide_happy.png")


def test_existing_path_passes_through(scripts_dir):
    resolver = AvatarResolver(scripts_dir / "elsewhere")
    path = str(scripts_dir / "avatars" / "guide_happy.png")

    assert resolver.resolve(path) == path


def test_parse_color():
    assert parse_color("#FFD166") == (255, 209, 102, 255)
    assert parse_color("#11223344") == (0x11, 0x22, 0x33, 0x44)
    assert parse_color("definitely not a color") is None
