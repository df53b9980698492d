"""Built-in mode definitions that seed a host registry with a familiar tree."""

from __future__ import annotations

from typing import Iterable, Sequence

from so_long_engine.buffer import Buffer, CommentSyntax

from .base_mode import MinorModeDefinition, ModeDefinition
from .registry import ModeRegistry

FALLBACK_MODE = "so-long-mode"
DEFAULT_MODE = "fundamental-mode"

HASH_COMMENTS = CommentSyntax(line_starts=("#",))
C_COMMENTS = CommentSyntax(line_starts=("//",), blocks=(("/*", "*/"),))
CSS_COMMENTS = CommentSyntax(blocks=(("/*", "*/"),))
LISP_COMMENTS = CommentSyntax(line_starts=(";",))
SGML_COMMENTS = CommentSyntax(blocks=(("<!--", "-->"),))


def _so_long_setup(buffer: Buffer) -> None:
    buffer.local_variables["truncate-lines"] = False
    buffer.local_variables["bidi-paragraph-direction"] = "left-to-right"


DEFAULT_MODES: tuple[ModeDefinition, ...] = (
    ModeDefinition(DEFAULT_MODE, description="Bare editing with no syntax support"),
    ModeDefinition("text-mode", description="Prose"),
    ModeDefinition(
        "prog-mode",
        minor_modes=("font-lock-mode", "display-line-numbers-mode"),
        description="Base for programming language modes",
    ),
    ModeDefinition("python-mode", parent="prog-mode", comment_syntax=HASH_COMMENTS),
    ModeDefinition("sh-mode", parent="prog-mode", comment_syntax=HASH_COMMENTS),
    ModeDefinition("c-mode", parent="prog-mode", comment_syntax=C_COMMENTS),
    ModeDefinition("js-mode", parent="prog-mode", comment_syntax=C_COMMENTS),
    ModeDefinition("json-mode", parent="js-mode", comment_syntax=C_COMMENTS),
    ModeDefinition("emacs-lisp-mode", parent="prog-mode", comment_syntax=LISP_COMMENTS),
    ModeDefinition(
        "css-mode",
        comment_syntax=CSS_COMMENTS,
        minor_modes=("font-lock-mode",),
        description="Stylesheets",
    ),
    ModeDefinition("scss-mode", parent="css-mode", comment_syntax=C_COMMENTS),
    ModeDefinition("less-css-mode", parent="css-mode", comment_syntax=C_COMMENTS),
    ModeDefinition("html-mode", parent="text-mode", comment_syntax=SGML_COMMENTS),
    ModeDefinition(
        FALLBACK_MODE,
        init=(_so_long_setup,),
        description="Minimal mode for files with very long lines",
    ),
)

DEFAULT_MINOR_MODES: tuple[MinorModeDefinition, ...] = (
    MinorModeDefinition("font-lock-mode", "Syntax highlighting"),
    MinorModeDefinition("display-line-numbers-mode", "Line numbers in the margin"),
    MinorModeDefinition("linum-mode", "Legacy line numbers"),
    MinorModeDefinition("prettify-symbols-mode", "Symbol prettification"),
    MinorModeDefinition("visual-line-mode", "Soft word wrapping"),
    MinorModeDefinition("highlight-changes-mode", "Change highlighting"),
    MinorModeDefinition("highlight-changes-visible-mode", "Visible change highlighting"),
    MinorModeDefinition("hi-lock-mode", "Interactive highlighting"),
    MinorModeDefinition("whitespace-mode", "Whitespace visualisation"),
)

DEFAULT_AUTO_MODES: tuple[tuple[str, str], ...] = (
    (r"\.py[iw]?\Z", "python-mode"),
    (r"\.(?:sh|bash|zsh)\Z", "sh-mode"),
    (r"\.[ch]\Z", "c-mode"),
    (r"\.(?:js|mjs|cjs)\Z", "js-mode"),
    (r"\.json\Z", "json-mode"),
    (r"\.el\Z", "emacs-lisp-mode"),
    (r"\.css\Z", "css-mode"),
    (r"\.scss\Z", "scss-mode"),
    (r"\.less\Z", "less-css-mode"),
    (r"\.html?\Z", "html-mode"),
    (r"\.(?:txt|text)\Z", "text-mode"),
)

DEFAULT_INTERPRETERS: tuple[tuple[str, str], ...] = (
    (r"python[0-9.]*", "python-mode"),
    (r"(?:ba|z|da)?sh", "sh-mode"),
    (r"node(?:js)?", "js-mode"),
)


def load_default_modes(
    registry: ModeRegistry,
    *,
    include_modes: Iterable[str] | None = None,
    extra_modes: Sequence[ModeDefinition] = (),
    replace: bool = False,
) -> ModeRegistry:
    """Register the built-in major and minor modes, then ``extra_modes``.

    ``include_modes`` restricts the built-in major modes to the named subset;
    the fallback and default modes are always registered.
    """

    wanted = None
    if include_modes is not None:
        wanted = set(include_modes) | {FALLBACK_MODE, DEFAULT_MODE}

    for definition in DEFAULT_MODES:
        if wanted is not None and definition.name not in wanted:
            continue
        if definition.parent is not None and not registry.has_mode(definition.parent):
            continue
        registry.register_mode(definition, replace=replace)

    for minor in DEFAULT_MINOR_MODES:
        registry.register_minor_mode(minor, replace=replace)

    for definition in extra_modes:
        registry.register_mode(definition, replace=replace)

    return registry


__all__ = [
    "DEFAULT_AUTO_MODES",
    "DEFAULT_INTERPRETERS",
    "DEFAULT_MINOR_MODES",
    "DEFAULT_MODE",
    "DEFAULT_MODES",
    "FALLBACK_MODE",
    "load_default_modes",
]
