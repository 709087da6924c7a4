"""Editor configuration and toolbar commands.

The document model itself belongs to the editor component. This module models
what the toolbar needs: which extensions are enabled and, for the current
selection, which marks and blocks are active. Every command is a pure function
from a :class:`SelectionState` to a new one.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from enum import Enum
import inspect
from typing import Any


class Mark(str, Enum):
    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"
    STRIKE = "strike"
    SUBSCRIPT = "subscript"
    SUPERSCRIPT = "superscript"
    CODE = "code"
    HIGHLIGHT = "highlight"


class ListKind(str, Enum):
    BULLET = "bulletList"
    ORDERED = "orderedList"


class EditorCommandError(ValueError):
    """Raised for unknown commands or commands disabled by configuration."""


@dataclass(frozen=True)
class ListConfig:
    keep_marks: bool = True
    keep_attributes: bool = False


@dataclass(frozen=True)
class LinkConfig:
    open_on_click: bool = False
    autolink: bool = True


@dataclass(frozen=True)
class EditorConfig:
    marks: frozenset[Mark] = frozenset(Mark)
    heading_levels: tuple[int, ...] = (1, 2, 3)
    lists: dict[ListKind, ListConfig] = field(
        default_factory=lambda: {ListKind.BULLET: ListConfig(), ListKind.ORDERED: ListConfig()},
        hash=False,
    )
    link: LinkConfig | None = LinkConfig()
    text_color: bool = True
    images: bool = True


DEFAULT_CONFIG = EditorConfig()


@dataclass(frozen=True)
class SelectionState:
    marks: frozenset[Mark] = frozenset()
    heading_level: int | None = None
    list_kind: ListKind | None = None
    link_href: str | None = None
    color: str | None = None
    images: tuple[str, ...] = ()


def _require_mark(config: EditorConfig, mark: Mark) -> None:
    if mark not in config.marks:
        raise EditorCommandError(f"Mark '{mark.value}' is not enabled")


def toggle_mark(state: SelectionState, mark: Mark, config: EditorConfig = DEFAULT_CONFIG) -> SelectionState:
    _require_mark(config, mark)
    return replace(state, marks=state.marks ^ {mark})


def toggle_heading(state: SelectionState, level: int, config: EditorConfig = DEFAULT_CONFIG) -> SelectionState:
    if level not in config.heading_levels:
        raise EditorCommandError(f"Heading level {level} is not enabled")
    return replace(state, heading_level=None if state.heading_level == level else level)


def toggle_list(state: SelectionState, kind: ListKind, config: EditorConfig = DEFAULT_CONFIG) -> SelectionState:
    list_config = config.lists.get(kind)
    if list_config is None:
        raise EditorCommandError(f"List '{kind.value}' is not enabled")

    if state.list_kind is kind:
        return replace(state, list_kind=None)

    if list_config.keep_marks:
        return replace(state, list_kind=kind)
    return replace(state, list_kind=kind, marks=frozenset())


def set_link(state: SelectionState, url: str | None, config: EditorConfig = DEFAULT_CONFIG) -> SelectionState:
    """Apply the answer of the link prompt.

    ``None`` means the prompt was cancelled and leaves the state alone, an
    empty string removes the link, anything else becomes the new href.
    """
    if config.link is None:
        raise EditorCommandError("Links are not enabled")
    if url is None:
        return state
    if url == "":
        return replace(state, link_href=None)
    return replace(state, link_href=url)


def unset_link(state: SelectionState, config: EditorConfig = DEFAULT_CONFIG) -> SelectionState:
    return set_link(state, "", config)


def insert_image(state: SelectionState, url: str | None, config: EditorConfig = DEFAULT_CONFIG) -> SelectionState:
    if not config.images:
        raise EditorCommandError("Images are not enabled")
    if not url:
        return state
    return replace(state, images=state.images + (url,))


def set_color(state: SelectionState, color: str | None, config: EditorConfig = DEFAULT_CONFIG) -> SelectionState:
    if not config.text_color:
        raise EditorCommandError("Text color is not enabled")
    return replace(state, color=color or None)


def unset_color(state: SelectionState, config: EditorConfig = DEFAULT_CONFIG) -> SelectionState:
    return set_color(state, None, config)


Command = Callable[..., SelectionState]

COMMANDS: dict[str, Command] = {
    "toggleBold": lambda state, config: toggle_mark(state, Mark.BOLD, config),
    "toggleItalic": lambda state, config: toggle_mark(state, Mark.ITALIC, config),
    "toggleUnderline": lambda state, config: toggle_mark(state, Mark.UNDERLINE, config),
    "toggleStrike": lambda state, config: toggle_mark(state, Mark.STRIKE, config),
    "toggleSubscript": lambda state, config: toggle_mark(state, Mark.SUBSCRIPT, config),
    "toggleSuperscript": lambda state, config: toggle_mark(state, Mark.SUPERSCRIPT, config),
    "toggleCode": lambda state, config: toggle_mark(state, Mark.CODE, config),
    "toggleHighlight": lambda state, config: toggle_mark(state, Mark.HIGHLIGHT, config),
    "toggleHeading": lambda state, config, level: toggle_heading(state, level, config),
    "toggleBulletList": lambda state, config: toggle_list(state, ListKind.BULLET, config),
    "toggleOrderedList": lambda state, config: toggle_list(state, ListKind.ORDERED, config),
    "setLink": lambda state, config, href: set_link(state, href, config),
    "unsetLink": lambda state, config: unset_link(state, config),
    "setImage": lambda state, config, src: insert_image(state, src, config),
    "setColor": lambda state, config, color: set_color(state, color, config),
    "unsetColor": lambda state, config: unset_color(state, config),
}


def apply_command(
    state: SelectionState,
    name: str,
    config: EditorConfig = DEFAULT_CONFIG,
    **args: Any,
) -> SelectionState:
    command = COMMANDS.get(name)
    if command is None:
        raise EditorCommandError(f"Unknown command '{name}'")
    try:
        inspect.signature(command).bind(state, config, **args)
    except TypeError as exc:
        raise EditorCommandError(f"Invalid arguments for '{name}': {sorted(args)}") from exc
    return command(state, config, **args)


def is_active(state: SelectionState, name: str, **attrs: Any) -> bool:
    """Answer the toolbar's ``isActive`` query for a mark or node name."""
    if name == "heading":
        level = attrs.get("level")
        if level is None:
            return state.heading_level is not None
        return state.heading_level == level
    if name == "link":
        return state.link_href is not None
    if name == "textStyle":
        color = attrs.get("color")
        return state.color is not None and (color is None or state.color == color)
    try:
        return ListKind(name) is state.list_kind
    except ValueError:
        pass
    try:
        return Mark(name) in state.marks
    except ValueError:
        return False


@dataclass(frozen=True)
class ToolbarAction:
    label: str
    command: str
    args: tuple[tuple[str, Any], ...] = ()
    prompt: bool = False

    @property
    def active_query(self) -> tuple[str, dict[str, Any]]:
        if self.command == "toggleHeading":
            return "heading", dict(self.args)
        if self.command in ("setLink", "setImage"):
            return ("link" if self.command == "setLink" else "image"), {}
        name = self.command.removeprefix("toggle")
        return name[0].lower() + name[1:], {}


TOOLBAR: tuple[ToolbarAction, ...] = (
    ToolbarAction("Heading 1", "toggleHeading", (("level", 1),)),
    ToolbarAction("Heading 2", "toggleHeading", (("level", 2),)),
    ToolbarAction("Heading 3", "toggleHeading", (("level", 3),)),
    ToolbarAction("Bold", "toggleBold"),
    ToolbarAction("Italic", "toggleItalic"),
    ToolbarAction("Underline", "toggleUnderline"),
    ToolbarAction("Strike", "toggleStrike"),
    ToolbarAction("Bullet list", "toggleBulletList"),
    ToolbarAction("Ordered list", "toggleOrderedList"),
    ToolbarAction("Subscript", "toggleSubscript"),
    ToolbarAction("Superscript", "toggleSuperscript"),
    ToolbarAction("Link", "setLink", prompt=True),
    ToolbarAction("Image", "setImage", prompt=True),
)


def press(
    state: SelectionState,
    action: ToolbarAction,
    prompt_answer: str | None = None,
    config: EditorConfig = DEFAULT_CONFIG,
) -> SelectionState:
    """Run a toolbar action; prompted actions take the user's answer."""
    args = dict(action.args)
    if action.prompt:
        args["href" if action.command == "setLink" else "src"] = prompt_answer
    return apply_command(state, action.command, config, **args)


def describe(config: EditorConfig = DEFAULT_CONFIG) -> dict[str, Any]:
    """Extension settings and toolbar layout handed to the editor component."""
    return {
        "marks": sorted(mark.value for mark in config.marks),
        "heading": {"levels": list(config.heading_levels)},
        "lists": {
            kind.value: {"keepMarks": list_config.keep_marks, "keepAttributes": list_config.keep_attributes}
            for kind, list_config in config.lists.items()
        },
        "link": (
            {"openOnClick": config.link.open_on_click, "autolink": config.link.autolink}
            if config.link is not None
            else None
        ),
        "textColor": config.text_color,
        "images": config.images,
        "toolbar": [
            {"label": action.label, "command": action.command, "args": dict(action.args), "prompt": action.prompt}
            for action in TOOLBAR
        ],
    }
