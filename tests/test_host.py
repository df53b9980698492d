from __future__ import annotations

from typing import List

import pytest

from so_long_engine.actions import (
    CallableEffect,
    DisableMinorMode,
    InhibitWhitespaceMode,
    MakeBufferReadOnly,
    restore_minor_modes,
    run_side_effects,
    suppress_minor_modes,
)
from so_long_engine.buffer import Buffer
from so_long_engine.host import EditorHost
from so_long_engine.modes.defaults import C_COMMENTS, HASH_COMMENTS


def make_host() -> EditorHost:
    return EditorHost(global_minor_modes=("font-lock-mode", "whitespace-mode"))


def test_mode_selection_order() -> None:
    host = make_host()

    declared = host.open_buffer("a", "-*- mode: text -*-\n", file_name="a.py")
    shebang = host.open_buffer("b", "#!/usr/bin/env python3\nprint(1)\n")
    by_name = host.open_buffer("c", "x\n", file_name="c.json")
    fallback = host.open_buffer("d", "plain\n")

    assert declared.major_mode == "text-mode"
    assert shebang.major_mode == "python-mode"
    assert by_name.major_mode == "json-mode"
    assert fallback.major_mode == "fundamental-mode"


def test_unknown_declared_mode_is_ignored() -> None:
    host = make_host()

    buffer = host.open_buffer("a", "-*- mode: klingon -*-\n", file_name="a.sh")

    assert buffer.major_mode == "sh-mode"


def test_activation_enables_lineage_minor_modes_and_notifies() -> None:
    host = make_host()
    seen: List[str] = []

    def listener(buffer: Buffer) -> None:
        seen.append(buffer.major_mode or "")

    assert host.add_after_change_listener(listener)
    assert not host.add_after_change_listener(listener)
    buffer = host.open_buffer("a.json", "{}\n", file_name="a.json")

    assert {"font-lock-mode", "display-line-numbers-mode"} <= buffer.minor_modes
    assert seen == ["json-mode"]
    assert host.remove_after_change_listener(listener)
    assert not host.remove_after_change_listener(listener)


def test_comment_syntax_is_inherited() -> None:
    host = make_host()

    assert host.comment_syntax("python-mode") is HASH_COMMENTS
    assert host.comment_syntax("json-mode") is C_COMMENTS
    assert host.comment_syntax("text-mode") is None
    assert host.comment_syntax(None) is None
    assert host.comment_syntax("unknown-mode") is None


def test_full_local_variable_pass_applies_values() -> None:
    host = make_host()
    text = "-*- mode: python; fill-column: 79 -*-\nprint(1)\n"

    buffer = host.open_buffer("a", text)

    assert buffer.major_mode == "python-mode"
    assert buffer.local_variables["fill-column"] == 79
    assert "mode" not in buffer.local_variables


def test_set_minor_mode_rejects_unknown_names() -> None:
    host = make_host()
    buffer = host.open_buffer("a", "")

    with pytest.raises(KeyError):
        host.set_minor_mode(buffer, "nlinum-mode", False)


def test_suppress_and_restore_minor_modes() -> None:
    host = make_host()
    buffer = host.open_buffer("a", "")

    disabled = suppress_minor_modes(
        host, buffer, ["nlinum-mode", "font-lock-mode", "hi-lock-mode"]
    )

    assert disabled == ["font-lock-mode"]
    assert "font-lock-mode" not in buffer.minor_modes
    assert restore_minor_modes(host, buffer) == ["font-lock-mode"]
    assert "font-lock-mode" in buffer.minor_modes
    assert buffer.override.suppressed_minor_modes == []


def test_side_effect_names_and_restore() -> None:
    host = make_host()
    buffer = host.open_buffer("a", "")

    def tag(host: EditorHost, buffer: Buffer) -> None:
        buffer.local_variables["tagged"] = True

    effects = [
        CallableEffect(tag),
        CallableEffect(tag, label="custom"),
        DisableMinorMode("font-lock-mode"),
        InhibitWhitespaceMode(),
        MakeBufferReadOnly(),
    ]

    outcomes = run_side_effects(effects, host, buffer)

    assert [outcome.name for outcome in outcomes] == [
        "tag",
        "custom",
        "disable:font-lock-mode",
        "disable:whitespace-mode",
        "make_buffer_read_only",
    ]
    assert all(outcome.status == "ok" for outcome in outcomes)
    assert buffer.read_only
    assert "whitespace-mode" not in buffer.minor_modes

    run_side_effects(reversed(effects), host, buffer, restore=True)
    assert not buffer.read_only


def test_kill_buffer() -> None:
    host = make_host()
    buffer = host.open_buffer("a", "")

    assert host.kill_buffer("a") is buffer
    assert host.kill_buffer("a") is None
