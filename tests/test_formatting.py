import pytest

from editor_time_tracker.events import TimeTrackerEvent
from editor_time_tracker.formatting import ValueProviderRegistry, preview_values, render


def _registry(**providers):
    registry = ValueProviderRegistry()
    for name, provider in providers.items():
        registry.register(name, provider)
    return registry


def test_known_placeholder_receives_format():
    calls = []

    def provider(event, fmt):
        calls.append((event, fmt))
        return "value"

    result = render("a %thing:xyz% b", TimeTrackerEvent.EDITOR_BLUR, _registry(thing=provider))

    assert result == "a value b"
    assert calls == [(TimeTrackerEvent.EDITOR_BLUR, "xyz")]


def test_missing_format_is_passed_as_empty_string():
    seen = []
    render("%thing%", TimeTrackerEvent.EDITOR_BLUR, _registry(thing=lambda e, f: seen.append(f) or ""))
    assert seen == [""]


def test_unknown_placeholder_is_preserved():
    template = "%missing% and %missing:fmt%"
    assert render(template, TimeTrackerEvent.EDITOR_FOCUS, _registry()) == template


def test_failing_provider_degrades_to_literal_token():
    def boom(event, fmt):
        raise RuntimeError("provider failure")

    result = render("x %bad:F2% y %ok%", TimeTrackerEvent.USER_AFK, _registry(bad=boom, ok=lambda e, f: "fine"))

    assert result == "x %bad:F2% y fine"


@pytest.mark.parametrize("event", list(TimeTrackerEvent))
def test_event_placeholder_renders_event_name(event, registry):
    assert render("%event%", event, registry) == event.value


def test_first_percent_closes_token():
    registry = _registry(a=lambda e, f: "A", b=lambda e, f: "B")
    assert render("%a%%b%", TimeTrackerEvent.EDITOR_START, registry) == "AB"


def test_format_may_contain_colons_and_spaces():
    registry = _registry(echo=lambda e, f: f"<{f}>")
    assert render("%echo:HH:mm ss%", TimeTrackerEvent.EDITOR_START, registry) == "<HH:mm ss>"


def test_text_without_placeholders_is_unchanged():
    assert render("plain text", TimeTrackerEvent.EDITOR_START, _registry()) == "plain text"


def test_default_template(registry):
    result = render("[%date:s%] %event% @ %project%", TimeTrackerEvent.EDITOR_FOCUS, registry)
    assert result == "[2024-05-01T12:30:45] editor-focus @ Demo"


def test_register_rejects_duplicates_and_empty_names():
    registry = _registry(event=lambda e, f: "")
    with pytest.raises(ValueError):
        registry.register("event", lambda e, f: "")
    with pytest.raises(ValueError):
        registry.register("", lambda e, f: "")


def test_frozen_registry_rejects_registration():
    registry = ValueProviderRegistry().freeze()
    assert registry.frozen
    with pytest.raises(RuntimeError):
        registry.register("late", lambda e, f: "")


def test_registry_is_iterable():
    registry = _registry(a=lambda e, f: "", b=lambda e, f: "")
    assert list(registry) == ["a", "b"]
    assert len(registry) == 2
    assert "a" in registry
    assert "c" not in registry


def test_preview_values_call_providers_without_format():
    seen = []

    def recording(event, fmt):
        seen.append(fmt)
        return "value"

    def broken(event, fmt):
        raise RuntimeError("provider failure")

    registry = _registry(first=recording, broken=broken)
    rows = preview_values(registry, TimeTrackerEvent.EDITOR_FOCUS)

    assert rows == [("%first%", "value"), ("%broken%", "%broken%")]
    assert seen == [None]


def test_preview_values_for_default_providers(registry):
    rows = dict(preview_values(registry, TimeTrackerEvent.EDITOR_FOCUS))
    assert rows["%project%"] == "Demo"
    assert rows["%event%"] == "editor-focus"
    assert rows["%date%"] == "2024-05-01 12:30:45"
