"""Key tokens, binding predicates and the default binding tables."""

from __future__ import annotations

import unittest

from blockvim.input import KeyBinding, KeyBindingRegistry, KeyEvent, build_keymaps, key_token
from blockvim.mode import Mode


class KeyTokenTests(unittest.TestCase):
    def test_plain_and_shifted_characters(self) -> None:
        self.assertEqual(key_token(KeyEvent("g")), "g")
        self.assertEqual(key_token(KeyEvent("G", shift=True)), "G")
        self.assertEqual(key_token(KeyEvent("?", shift=True)), "?")

    def test_modifier_prefix_order_is_fixed(self) -> None:
        self.assertEqual(key_token(KeyEvent("d", ctrl=True)), "ctrl+d")
        self.assertEqual(key_token(KeyEvent("K", meta=True, shift=True)), "cmd+shift+k")
        self.assertEqual(key_token(KeyEvent("x", ctrl=True, meta=True, alt=True)), "ctrl+cmd+alt+x")

    def test_named_keys(self) -> None:
        self.assertEqual(key_token(KeyEvent(" ")), "space")
        self.assertEqual(key_token(KeyEvent("Escape")), "escape")
        self.assertEqual(key_token(KeyEvent("ArrowUp", shift=True)), "shift+arrowup")


class KeyBindingRegistryTests(unittest.TestCase):
    def test_specific_binding_is_not_shadowed_by_earlier_general_one(self) -> None:
        registry = KeyBindingRegistry().register_bindings(
            KeyBinding(("k",), "general"),
            KeyBinding(("k",), "specific", meta=True, shift=True),
        )
        self.assertEqual(registry.match(KeyEvent("k", meta=True, shift=True)).command, "specific")
        self.assertEqual(registry.match(KeyEvent("k")).command, "general")
        self.assertEqual(len(registry), 2)

    def test_equal_specificity_keeps_registration_order(self) -> None:
        registry = KeyBindingRegistry().register_bindings(
            KeyBinding(("a",), "first", shift=False),
            KeyBinding(("a",), "second", ctrl=False),
        )
        self.assertEqual(registry.match(KeyEvent("a")).command, "first")

    def test_exact_bindings_match_the_typed_character(self) -> None:
        binding = KeyBinding(("?",), "help", exact=True)
        self.assertTrue(binding.matches(KeyEvent("?", shift=True)))
        self.assertFalse(binding.matches(KeyEvent("/")))

    def test_unmatched_returns_none(self) -> None:
        self.assertIsNone(KeyBindingRegistry().match(KeyEvent("z")))


class DefaultBindingTests(unittest.TestCase):
    def setUp(self) -> None:
        self.keymaps = build_keymaps()

    def command(self, mode: Mode, event: KeyEvent) -> str | None:
        binding = self.keymaps[mode].singles.match(event)
        return binding.command if binding is not None else None

    def test_modifier_variants_of_one_key_resolve_to_distinct_commands(self) -> None:
        normal = Mode.NORMAL
        self.assertEqual(self.command(normal, KeyEvent("y")), "copy_selected_block")
        self.assertEqual(self.command(normal, KeyEvent("Y", shift=True)), "copy_block_embed")
        self.assertEqual(self.command(normal, KeyEvent("y", alt=True)), "copy_block_reference")
        self.assertEqual(self.command(normal, KeyEvent("y", ctrl=True)), "scroll_up")

    def test_page_hint_keys(self) -> None:
        self.assertEqual(self.command(Mode.NORMAL, KeyEvent("F", shift=True)), "show_page_hints")
        self.assertEqual(
            self.command(Mode.NORMAL, KeyEvent("F", shift=True, ctrl=True)),
            "show_page_hints_in_sidebar",
        )

    def test_block_hint_keys_carry_link_index(self) -> None:
        binding = self.keymaps[Mode.NORMAL].singles.match(KeyEvent("e"))
        self.assertEqual((binding.command, binding.args), ("click_hint", (2,)))
        binding = self.keymaps[Mode.NORMAL].singles.match(KeyEvent("B", shift=True))
        self.assertEqual((binding.command, binding.args), ("shift_click_hint", (5,)))
        self.assertEqual(self.command(Mode.NORMAL, KeyEvent("e", ctrl=True)), "scroll_down")

    def test_visual_mode_rebinds_d_and_shifted_motion(self) -> None:
        self.assertEqual(self.command(Mode.VISUAL, KeyEvent("d")), "cut_highlight")
        self.assertEqual(self.command(Mode.VISUAL, KeyEvent("J", shift=True)), "grow_highlight_down")
        self.assertEqual(self.command(Mode.VISUAL, KeyEvent("k", meta=True, shift=True)), "move_block_up")

    def test_insert_mode_only_binds_global_keys(self) -> None:
        self.assertEqual(self.command(Mode.INSERT, KeyEvent("Escape")), "return_to_normal_mode")
        self.assertEqual(self.command(Mode.INSERT, KeyEvent("w", ctrl=True)), "close_sidebar_page")
        self.assertIsNone(self.command(Mode.INSERT, KeyEvent("j")))
        self.assertNotIn(Mode.HINT, self.keymaps)


if __name__ == "__main__":
    unittest.main()
