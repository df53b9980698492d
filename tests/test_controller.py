from __future__ import annotations

from typing import Any, List

import pytest

from so_long_engine.actions import MakeBufferReadOnly
from so_long_engine.adapters.textual import SO_LONG_EVENTS
from so_long_engine.buffer import Buffer, BufferDocument, OverridePhase
from so_long_engine.engine import (
    NoOriginalModeError,
    OverrideController,
    Settings,
    detect_long_line,
)
from so_long_engine.host import EditorHost
from so_long_engine.localvars import LocalConfigResolver
from so_long_engine.modes import FALLBACK_MODE
from so_long_engine.session import Session, create_default_session

LONG = "x" * 300


def make_session(**changes: Any) -> Session:
    settings = Settings()
    if changes:
        settings.update(**changes)
    return create_default_session(settings)


def make_controlled_host(
    settings: Settings | None = None, **host_options: Any
) -> tuple[EditorHost, OverrideController]:
    host = EditorHost(**host_options)
    controller = OverrideController(host, settings or Settings())
    controller.enable()
    return host, controller


def record_events(host: EditorHost) -> List[tuple[str, Any]]:
    events: List[tuple[str, Any]] = []
    for name in SO_LONG_EVENTS:
        host.bus.subscribe(
            name, lambda payload, name=name: events.append((name, payload))
        )
    return events


def test_long_first_line_in_target_mode_is_overridden() -> None:
    session = make_session()

    buffer = session.open_text("bundle.js", LONG + "\n", file_name="bundle.js")

    assert buffer.major_mode == FALLBACK_MODE
    assert buffer.override.original_mode == "js-mode"
    assert buffer.override.phase is OverridePhase.OVERRIDDEN
    assert buffer.read_only
    assert "font-lock-mode" not in buffer.minor_modes
    assert buffer.local_variables["truncate-lines"] is False


def test_short_lines_keep_the_selected_mode() -> None:
    session = make_session()

    buffer = session.open_text("ok.js", "\n".join(["x" * 10] * 6), file_name="ok.js")

    assert buffer.major_mode == "js-mode"
    assert buffer.override.phase is OverridePhase.NO_OVERRIDE
    assert buffer.override.original_mode is None
    assert not buffer.read_only


def test_header_mode_declaration_inhibits_override() -> None:
    session = make_session()
    events = record_events(session.host)
    text = "-*- mode: text -*-\n" + "\n".join(["y" * 1000] * 10)

    buffer = session.open_text("data.js", text, file_name="data.js")

    assert buffer.major_mode == "text-mode"
    assert buffer.override.phase is OverridePhase.INHIBITED
    assert buffer.override.inhibited == ("text-mode",)
    assert [name for name, _ in events] == ["so_long.inhibited"]


def test_trailing_block_mode_declaration_inhibits_override() -> None:
    session = make_session()
    text = LONG + "\n// Local Variables:\n// mode: js\n// End:\n"

    buffer = session.open_text("min.js", text, file_name="min.js")

    assert buffer.major_mode == "js-mode"
    assert buffer.override.phase is OverridePhase.INHIBITED


def test_coding_only_header_does_not_inhibit() -> None:
    session = make_session()

    buffer = session.open_text(
        "a.js", "// -*- coding: utf-8 -*-\n" + LONG, file_name="a.js"
    )

    assert buffer.major_mode == FALLBACK_MODE


def test_empty_header_mode_value_inhibits_override() -> None:
    session = make_session()

    buffer = session.open_text("a.js", "// -*- mode: ; -*-\n" + LONG, file_name="a.js")

    assert buffer.major_mode == "js-mode"
    assert buffer.override.phase is OverridePhase.INHIBITED
    assert buffer.override.inhibited == ("-mode",)


def test_header_ignored_when_local_variables_are_disabled() -> None:
    host, _ = make_controlled_host(resolver=LocalConfigResolver(enabled=False))

    text = "// -*- mode: text -*-\n" + LONG
    buffer = host.open_buffer("a.js", text, file_name="a.js")

    assert buffer.major_mode == FALLBACK_MODE
    assert buffer.override.inhibited == ()


def test_leading_comment_lines_are_not_counted() -> None:
    session = make_session()
    text = "# " + "c" * 400 + "\n" + "print('hi')\n"

    buffer = session.open_text("tool.py", text, file_name="tool.py")

    assert buffer.major_mode == "python-mode"


def test_non_target_mode_is_never_scanned() -> None:
    calls: List[Any] = []

    def spy(*args: Any, **kwargs: Any) -> bool:
        calls.append(args)
        return True

    host = EditorHost()
    controller = OverrideController(host, Settings(), scanner=spy)
    controller.enable()

    buffer = host.open_buffer("notes.txt", LONG, file_name="notes.txt")

    assert buffer.major_mode == "text-mode"
    assert calls == []


def test_css_family_is_targeted() -> None:
    session = make_session()

    scss = session.open_text("site.scss", LONG, file_name="site.scss")
    css_text = "/* " + "c" * 500 + " */\n" + LONG
    css = session.open_text("site.css", css_text, file_name="site.css")

    assert scss.override.original_mode == "scss-mode"
    assert css.override.original_mode == "css-mode"
    assert css.major_mode == FALLBACK_MODE


def test_custom_target_modes() -> None:
    session = make_session(target_modes=["text-mode"])

    text = session.open_text("notes.txt", LONG, file_name="notes.txt")
    html = session.open_text("page.html", LONG, file_name="page.html")
    code = session.open_text("bundle.js", LONG, file_name="bundle.js")

    assert text.major_mode == FALLBACK_MODE
    assert html.major_mode == FALLBACK_MODE
    assert code.major_mode == "js-mode"


def test_disabled_configuration_has_no_side_effects() -> None:
    calls: List[Any] = []

    def spy(*args: Any, **kwargs: Any) -> bool:
        calls.append(args)
        return detect_long_line(*args, **kwargs)

    settings = Settings()
    settings.update(enabled=False)
    host = EditorHost()
    controller = OverrideController(host, settings, scanner=spy)
    controller.enable()
    events = record_events(host)

    buffer = host.open_buffer("bundle.js", LONG, file_name="bundle.js")

    assert buffer.major_mode == "js-mode"
    assert buffer.override.phase is OverridePhase.NO_OVERRIDE
    assert buffer.override.original_mode is None
    assert buffer.override.inhibited == ()
    assert not buffer.read_only
    assert calls == []
    assert events == []


def test_enable_and_disable_are_idempotent() -> None:
    host = EditorHost()
    controller = OverrideController(host)

    controller.enable()
    controller.enable()
    assert controller.enabled
    assert len(host.mode_selection) == 1
    assert len(host.local_config) == 1

    controller.disable()
    controller.disable()
    assert not controller.enabled
    assert len(host.mode_selection) == 0

    buffer = host.open_buffer("bundle.js", LONG, file_name="bundle.js")
    assert buffer.major_mode == "js-mode"
    assert buffer.override.phase is OverridePhase.UNEVALUATED


def test_revert_restores_original_mode_once() -> None:
    session = make_session()
    events = record_events(session.host)
    buffer = session.open_text("bundle.js", LONG, file_name="bundle.js")

    assert session.controller.revert(buffer) == "js-mode"

    assert buffer.major_mode == "js-mode"
    assert buffer.override.phase is OverridePhase.REVERTED
    assert buffer.override.original_mode is None
    assert not buffer.read_only
    assert "font-lock-mode" in buffer.minor_modes
    assert [name for name, _ in events][-1] == "so_long.revert"

    with pytest.raises(NoOriginalModeError) as info:
        session.controller.revert(buffer)
    assert str(info.value) == "no original mode recorded"
    assert buffer.major_mode == "js-mode"


def test_revert_without_override_fails() -> None:
    session = make_session()
    buffer = session.open_text("ok.py", "x = 1\n", file_name="ok.py")

    with pytest.raises(NoOriginalModeError):
        session.controller.revert(buffer)


def test_revert_restores_suppressed_global_whitespace_mode() -> None:
    host, controller = make_controlled_host(
        global_minor_modes=("font-lock-mode", "whitespace-mode")
    )
    buffer = host.open_buffer("bundle.js", LONG, file_name="bundle.js")

    assert "whitespace-mode" not in buffer.minor_modes
    suppressed = buffer.override.suppressed_minor_modes
    assert suppressed == ["font-lock-mode", "whitespace-mode"]

    controller.revert(buffer)

    assert "whitespace-mode" in buffer.minor_modes
    assert buffer.override.suppressed_minor_modes == []


def test_revert_keeps_buffer_read_only_when_it_already_was() -> None:
    host, controller = make_controlled_host()
    buffer = Buffer.from_text(LONG, name="ro.js", file_name="ro.js")
    buffer.read_only = True
    host.buffers[buffer.name] = buffer

    host.normal_mode(buffer)
    assert buffer.major_mode == FALLBACK_MODE

    controller.revert(buffer)
    assert buffer.read_only


def test_revert_drops_fallback_locals_and_reapplies_file_locals() -> None:
    session = make_session()
    text = LONG + "\n// Local Variables:\n// fill-column: 72\n// End:\n"
    buffer = session.open_text("bundle.js", text, file_name="bundle.js")
    assert buffer.major_mode == FALLBACK_MODE
    assert buffer.local_variables["truncate-lines"] is False

    passes: List[bool] = []

    def record_pass(call_next: Any, buffer: Buffer, *, query_only: bool = True) -> Any:
        passes.append(query_only)
        return call_next(buffer, query_only=query_only)

    session.host.local_config.install(record_pass)
    buffer.local_variables["fill-column"] = 10

    session.controller.revert(buffer)

    assert passes == [False]
    assert buffer.local_variables == {"fill-column": 72}
    assert "bidi-paragraph-direction" not in buffer.local_variables


def test_revert_uses_hooks_from_the_override() -> None:
    session = make_session()
    buffer = session.open_text("bundle.js", LONG, file_name="bundle.js")
    assert buffer.read_only

    session.controller.settings.update(hooks=())
    session.controller.revert(buffer)

    assert buffer.major_mode == "js-mode"
    assert not buffer.read_only


def test_failing_hook_does_not_stop_later_hooks() -> None:
    def explode(host: EditorHost, buffer: Buffer) -> None:
        raise RuntimeError("boom")

    settings = Settings()
    settings.update(hooks=(explode, MakeBufferReadOnly()))
    host, _ = make_controlled_host(settings)
    events = record_events(host)

    buffer = host.open_buffer("bundle.js", LONG, file_name="bundle.js")

    assert buffer.major_mode == FALLBACK_MODE
    assert buffer.read_only
    hooks = [payload for name, payload in events if name == "so_long.hooks"]
    assert len(hooks) == 1
    assert hooks[0]["hooks"] == [("explode", "failed"), ("make_buffer_read_only", "ok")]


def test_hooks_run_once_per_override() -> None:
    calls: List[str] = []
    settings = Settings()
    settings.update(hooks=(lambda host, buffer: calls.append(buffer.name),))
    host, _ = make_controlled_host(settings)

    buffer = host.open_buffer("bundle.js", LONG, file_name="bundle.js")
    host.activate(buffer, FALLBACK_MODE)

    assert calls == ["bundle.js"]


def test_failing_scanner_falls_back_to_selected_mode() -> None:
    def broken(*args: Any, **kwargs: Any) -> bool:
        raise RuntimeError("scanner failure")

    host = EditorHost()
    OverrideController(host, scanner=broken).enable()

    buffer = host.open_buffer("bundle.js", LONG, file_name="bundle.js")

    assert buffer.major_mode == "js-mode"
    assert buffer.override.phase is OverridePhase.NO_OVERRIDE


def test_inhibition_does_not_leak_into_the_next_pass() -> None:
    session = make_session()
    buffer = session.open_text(
        "data.js", "-*- mode: text -*-\n" + LONG, file_name="data.js"
    )
    assert buffer.override.phase is OverridePhase.INHIBITED

    buffer.document = BufferDocument.from_text(LONG)
    session.host.normal_mode(buffer)

    assert buffer.override.inhibited == ()
    assert buffer.major_mode == FALLBACK_MODE
    assert buffer.override.original_mode == "js-mode"


def test_later_pass_without_override_undoes_the_previous_one() -> None:
    session = make_session()
    buffer = session.open_text("bundle.js", LONG, file_name="bundle.js")
    assert buffer.override.original_mode == "js-mode"

    session.controller.settings.update(threshold=1000)
    session.host.normal_mode(buffer)

    assert buffer.major_mode == "js-mode"
    assert buffer.override.phase is OverridePhase.NO_OVERRIDE
    assert buffer.override.original_mode is None
    assert buffer.override.suppressed_minor_modes == []
    assert not buffer.read_only
    assert "font-lock-mode" in buffer.minor_modes
    with pytest.raises(NoOriginalModeError):
        session.controller.revert(buffer)


def test_later_inhibited_pass_undoes_the_previous_override() -> None:
    session = make_session()
    buffer = session.open_text("bundle.js", LONG, file_name="bundle.js")

    buffer.document = BufferDocument.from_text("-*- mode: text -*-\n" + LONG)
    session.host.normal_mode(buffer)

    assert buffer.major_mode == "text-mode"
    assert buffer.override.phase is OverridePhase.INHIBITED
    assert buffer.override.original_mode is None
    assert not buffer.read_only


def test_repeated_override_keeps_a_single_history() -> None:
    session = make_session()
    buffer = session.open_text("bundle.js", LONG, file_name="bundle.js")

    session.host.normal_mode(buffer)

    assert buffer.major_mode == FALLBACK_MODE
    assert buffer.override.original_mode == "js-mode"
    assert buffer.override.suppressed_minor_modes == ["font-lock-mode"]
    assert session.controller.revert(buffer) == "js-mode"
    assert not buffer.read_only
    assert "font-lock-mode" in buffer.minor_modes


def test_disabling_settings_undoes_the_previous_override() -> None:
    session = make_session()
    buffer = session.open_text("bundle.js", LONG, file_name="bundle.js")

    session.controller.settings.update(enabled=False)
    session.host.normal_mode(buffer)

    assert buffer.major_mode == "js-mode"
    assert buffer.override.original_mode is None
    assert not buffer.read_only


def test_fallback_mode_declaration_is_not_overridden_again() -> None:
    session = make_session()

    buffer = session.open_text(
        "a.js", "// -*- so-long -*-\n" + LONG, file_name="a.js"
    )

    assert buffer.major_mode == FALLBACK_MODE
    assert buffer.override.original_mode is None
    assert not buffer.read_only


def test_force_switches_without_detection() -> None:
    session = make_session()
    events = record_events(session.host)
    buffer = session.open_text("ok.py", "x = 1\n", file_name="ok.py")

    assert session.controller.force(buffer)

    assert buffer.major_mode == FALLBACK_MODE
    assert buffer.override.original_mode == "python-mode"
    assert buffer.override.phase is OverridePhase.OVERRIDDEN
    assert buffer.read_only
    assert [name for name, _ in events] == ["so_long.override", "so_long.hooks"]

    assert not session.controller.force(buffer)
    assert session.controller.revert(buffer) == "python-mode"
    assert not buffer.read_only


def test_settings_changes_apply_to_the_next_pass() -> None:
    session = make_session()
    first = session.open_text("a.js", "x" * 100, file_name="a.js")

    session.controller.settings.update(threshold=50)
    second = session.open_text("b.js", "x" * 100, file_name="b.js")

    assert first.major_mode == "js-mode"
    assert second.major_mode == FALLBACK_MODE


def test_override_event_payload() -> None:
    session = make_session()
    events = record_events(session.host)

    session.open_text("bundle.js", LONG, file_name="bundle.js")

    name, payload = events[0]
    assert name == "so_long.override"
    assert payload == {"buffer": "bundle.js", "original_mode": "js-mode"}
    hooks = dict(events)["so_long.hooks"]
    assert hooks["disabled_minor_modes"] == ["font-lock-mode"]
