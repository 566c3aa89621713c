import logging
import threading
from pathlib import Path

from editor_time_tracker import event_logger as event_logger_module
from editor_time_tracker.event_logger import EventLogger
from editor_time_tracker.events import TimeTrackerEvent


def _lines(path):
    return Path(path).read_text(encoding="utf-8").splitlines()


def test_appends_one_line_per_event_in_order(preferences, registry):
    logger = EventLogger(preferences, registry)
    events = [
        TimeTrackerEvent.EDITOR_START,
        TimeTrackerEvent.TRACKER_STARTED,
        TimeTrackerEvent.EDITOR_BLUR,
    ]
    for event in events:
        logger.log_event(event)

    assert _lines(preferences.log_file_path) == [
        f"[2024-05-01T12:30:45] {event.value} @ Demo" for event in events
    ]


def test_existing_content_is_kept(preferences, registry):
    Path(preferences.log_file_path).write_text("previous\n", encoding="utf-8")
    EventLogger(preferences, registry).log_event(TimeTrackerEvent.USER_AFK)
    assert _lines(preferences.log_file_path) == ["previous", "[2024-05-01T12:30:45] user-afk @ Demo"]


def test_template_and_path_are_read_per_call(preferences, registry, tmp_path):
    logger = EventLogger(preferences, registry)
    logger.log_event(TimeTrackerEvent.EDITOR_FOCUS)

    preferences.log_line = "%event%|%project%"
    preferences.log_file_path = tmp_path / "other.log"
    logger(TimeTrackerEvent.EDITOR_BLUR)

    assert _lines(tmp_path / "time-tracker.log") == ["[2024-05-01T12:30:45] editor-focus @ Demo"]
    assert _lines(tmp_path / "other.log") == ["editor-blur|Demo"]


def test_unicode_is_written_as_utf8(preferences, registry, host):
    host.product = "Prüfstand ☕"
    EventLogger(preferences, registry).log_event(TimeTrackerEvent.EDITOR_START)
    assert _lines(preferences.log_file_path) == ["[2024-05-01T12:30:45] editor-start @ Prüfstand ☕"]


def test_write_failure_is_reported_and_swallowed(preferences, registry, monkeypatch, caplog):
    logger = EventLogger(preferences, registry)
    logger.log_event(TimeTrackerEvent.EDITOR_START)
    before = Path(preferences.log_file_path).read_bytes()

    def failing_open(*args, **kwargs):
        raise PermissionError("denied")

    monkeypatch.setattr(event_logger_module, "open", failing_open, raising=False)
    with caplog.at_level(logging.WARNING, logger="editor_time_tracker.event_logger"):
        assert logger.log_event(TimeTrackerEvent.EDITOR_CLOSE) is None

    assert Path(preferences.log_file_path).read_bytes() == before
    assert "Failed to write log to file" in caplog.text


def test_invalid_path_does_not_raise(preferences, registry, tmp_path):
    preferences.log_file_path = tmp_path / "missing" / "dir" / "log.txt"
    EventLogger(preferences, registry).log_event(TimeTrackerEvent.EDITOR_START)
    assert not (tmp_path / "missing").exists()


def test_concurrent_writes_keep_lines_intact(preferences, registry):
    preferences.log_line = "%event%-" + "x" * 200
    logger = EventLogger(preferences, registry)

    def worker():
        for _ in range(50):
            logger.log_event(TimeTrackerEvent.USER_INTERACTION)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    lines = _lines(preferences.log_file_path)
    assert len(lines) == 200
    assert set(lines) == {"user-interaction-" + "x" * 200}
