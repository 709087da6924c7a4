"""Editor toolbar command tests."""

from __future__ import annotations

import unittest
from unittest.mock import patch

from inkwell.domain.editor import (
    COMMANDS,
    TOOLBAR,
    EditorCommandError,
    EditorConfig,
    ListConfig,
    ListKind,
    Mark,
    SelectionState,
    apply_command,
    describe,
    is_active,
    press,
)

_TOGGLES = (
    "toggleBold",
    "toggleItalic",
    "toggleUnderline",
    "toggleStrike",
    "toggleSubscript",
    "toggleSuperscript",
    "toggleCode",
    "toggleHighlight",
    "toggleBulletList",
    "toggleOrderedList",
)


def _toolbar_action(label: str):
    return next(action for action in TOOLBAR if action.label == label)


class ToggleCommandTests(unittest.TestCase):
    def test_toggling_twice_restores_the_selection(self) -> None:
        start = SelectionState(marks=frozenset({Mark.ITALIC}), link_href="https://example.com")
        for name in _TOGGLES:
            with self.subTest(command=name):
                once = apply_command(start, name)
                self.assertNotEqual(once, start)
                self.assertEqual(apply_command(once, name), start)

    def test_heading_toggle_twice_restores_the_selection(self) -> None:
        start = SelectionState()
        for level in (1, 2, 3):
            with self.subTest(level=level):
                once = apply_command(start, "toggleHeading", level=level)
                self.assertTrue(is_active(once, "heading", level=level))
                self.assertEqual(apply_command(once, "toggleHeading", level=level), start)

    def test_heading_switches_level(self) -> None:
        state = apply_command(SelectionState(), "toggleHeading", level=1)
        state = apply_command(state, "toggleHeading", level=2)
        self.assertEqual(state.heading_level, 2)
        self.assertFalse(is_active(state, "heading", level=1))
        self.assertTrue(is_active(state, "heading"))

    def test_heading_level_outside_config_is_rejected(self) -> None:
        with self.assertRaises(EditorCommandError):
            apply_command(SelectionState(), "toggleHeading", level=4)

    def test_subscript_and_superscript_toggle_independently(self) -> None:
        state = apply_command(SelectionState(), "toggleSubscript")
        state = apply_command(state, "toggleSuperscript")
        self.assertTrue(is_active(state, "subscript"))
        self.assertTrue(is_active(state, "superscript"))


class ListCommandTests(unittest.TestCase):
    def test_switching_list_kind(self) -> None:
        state = apply_command(SelectionState(), "toggleBulletList")
        self.assertTrue(is_active(state, "bulletList"))
        state = apply_command(state, "toggleOrderedList")
        self.assertTrue(is_active(state, "orderedList"))
        self.assertFalse(is_active(state, "bulletList"))

    def test_lists_keep_marks_by_default(self) -> None:
        state = SelectionState(marks=frozenset({Mark.BOLD}))
        self.assertEqual(apply_command(state, "toggleBulletList").marks, frozenset({Mark.BOLD}))

    def test_lists_can_drop_marks(self) -> None:
        config = EditorConfig(lists={ListKind.BULLET: ListConfig(keep_marks=False)})
        state = SelectionState(marks=frozenset({Mark.BOLD}))
        self.assertEqual(apply_command(state, "toggleBulletList", config).marks, frozenset())
        with self.assertRaises(EditorCommandError):
            apply_command(state, "toggleOrderedList", config)


class PromptCommandTests(unittest.TestCase):
    def test_link_prompt_answers(self) -> None:
        link = _toolbar_action("Link")
        linked = SelectionState(link_href="https://old.example")

        self.assertEqual(press(linked, link, None), linked)
        self.assertIsNone(press(linked, link, "").link_href)
        self.assertEqual(press(linked, link, "https://new.example").link_href, "https://new.example")
        self.assertFalse(is_active(apply_command(linked, "unsetLink"), "link"))

    def test_image_prompt_ignores_empty_answers(self) -> None:
        image = _toolbar_action("Image")
        state = SelectionState()
        self.assertEqual(press(state, image, ""), state)
        self.assertEqual(press(state, image, None), state)
        self.assertEqual(press(state, image, "https://example.com/a.png").images, ("https://example.com/a.png",))

    def test_color_set_and_unset(self) -> None:
        state = apply_command(SelectionState(), "setColor", color="#958DF1")
        self.assertTrue(is_active(state, "textStyle", color="#958DF1"))
        self.assertFalse(is_active(state, "textStyle", color="#000000"))
        self.assertFalse(is_active(apply_command(state, "unsetColor"), "textStyle"))


class CommandRegistryTests(unittest.TestCase):
    def test_unknown_command_is_rejected(self) -> None:
        with self.assertRaises(EditorCommandError):
            apply_command(SelectionState(), "toggleBlink")

    def test_missing_argument_is_rejected(self) -> None:
        with self.assertRaises(EditorCommandError):
            apply_command(SelectionState(), "toggleHeading")

    def test_unexpected_argument_is_rejected(self) -> None:
        with self.assertRaises(EditorCommandError):
            apply_command(SelectionState(), "toggleBold", level=2)

    def test_errors_raised_inside_a_command_are_not_reported_as_bad_arguments(self) -> None:
        def broken(state, config):
            raise TypeError("broken command")

        with patch.dict(COMMANDS, {"toggleBroken": broken}):
            with self.assertRaises(TypeError) as context:
                apply_command(SelectionState(), "toggleBroken")
        self.assertNotIsInstance(context.exception, EditorCommandError)
        self.assertEqual(str(context.exception), "broken command")

    def test_disabled_mark_is_rejected(self) -> None:
        config = EditorConfig(marks=frozenset({Mark.BOLD}))
        with self.assertRaises(EditorCommandError):
            apply_command(SelectionState(), "toggleItalic", config)

    def test_disabled_links_are_rejected(self) -> None:
        with self.assertRaises(EditorCommandError):
            apply_command(SelectionState(), "setLink", EditorConfig(link=None), href="https://example.com")

    def test_every_toolbar_action_is_a_known_command(self) -> None:
        for action in TOOLBAR:
            with self.subTest(label=action.label):
                self.assertIn(action.command, COMMANDS)

    def test_toolbar_press_reflects_active_state(self) -> None:
        state = SelectionState()
        for label in ("Bold", "Heading 2", "Ordered list"):
            action = _toolbar_action(label)
            with self.subTest(label=label):
                name, attrs = action.active_query
                self.assertFalse(is_active(state, name, **attrs))
                state = press(state, action)
                self.assertTrue(is_active(state, name, **attrs))


class DescribeTests(unittest.TestCase):
    def test_default_configuration(self) -> None:
        described = describe()
        self.assertEqual(described["heading"], {"levels": [1, 2, 3]})
        self.assertEqual(described["link"], {"openOnClick": False, "autolink": True})
        self.assertEqual(
            described["lists"]["bulletList"],
            {"keepMarks": True, "keepAttributes": False},
        )
        self.assertEqual(len(described["marks"]), len(Mark))
        self.assertEqual(
            [item["label"] for item in described["toolbar"]][:4],
            ["Heading 1", "Heading 2", "Heading 3", "Bold"],
        )


if __name__ == "__main__":
    unittest.main()
