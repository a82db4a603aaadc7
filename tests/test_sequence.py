"""Multi-key sequences, prefix suppression and idle expiry."""

from __future__ import annotations

import unittest

from fakes import FakeClock

from blockvim.input import PENDING, KeyEvent, Resolution, SequenceMatcher, build_keymaps
from blockvim.mode import Mode


class SequenceMatcherTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock()
        self.matcher = SequenceMatcher(build_keymaps(), timeout_seconds=0.5, clock=self.clock)

    def press(self, key: str, mode: Mode = Mode.NORMAL, **modifiers: bool) -> Resolution | None:
        return self.matcher.resolve(KeyEvent(key, **modifiers), mode)

    def test_gg_within_timeout_selects_first_block(self) -> None:
        self.assertEqual(self.press("g"), PENDING)
        self.clock.advance(0.3)
        self.assertEqual(self.press("g"), Resolution("select_first_block"))
        self.assertEqual(self.matcher.buffer, [])

    def test_gg_split_by_timeout_is_two_pending_prefixes(self) -> None:
        self.assertEqual(self.press("g"), PENDING)
        self.clock.advance(0.6)
        self.assertEqual(self.press("g"), PENDING)
        self.assertEqual(self.matcher.sequence, "g")

    def test_prefix_key_suppresses_its_single_binding(self) -> None:
        # "d" alone is unbound in Normal mode, but ctrl+d and shifted G are
        # distinct tokens and fall straight through to single bindings.
        self.assertEqual(self.press("d"), PENDING)
        self.matcher.clear()
        self.assertEqual(self.press("d", ctrl=True), Resolution("select_many_blocks_down"))
        self.assertEqual(self.press("G", shift=True), Resolution("select_last_block"))

    def test_dead_sequence_is_dropped_and_swallowed(self) -> None:
        self.press("d")
        self.assertEqual(self.press("j"), PENDING)
        self.assertEqual(self.matcher.buffer, [])
        self.assertEqual(self.press("j"), Resolution("select_block_down"))

    def test_escape_clears_partial_sequence(self) -> None:
        self.press("g")
        self.assertEqual(self.press("Escape"), Resolution("return_to_normal_mode"))
        self.assertEqual(self.matcher.buffer, [])
        self.assertEqual(self.press("g"), PENDING)

    def test_unmatched_key_returns_none_and_leaves_buffer_empty(self) -> None:
        self.assertIsNone(self.press("x"))
        self.assertEqual(self.matcher.buffer, [])

    def test_single_bindings_carry_arguments(self) -> None:
        self.assertEqual(self.press("w"), Resolution("click_hint", (1,)))

    def test_sequences_only_exist_in_normal_mode(self) -> None:
        self.assertEqual(self.press("d", Mode.VISUAL), Resolution("cut_highlight"))
        self.assertIsNone(self.press("g", Mode.INSERT))

    def test_mode_without_keymap_is_unmatched(self) -> None:
        self.press("g")
        self.assertIsNone(self.press("g", Mode.HINT))
        self.assertEqual(self.matcher.buffer, [])

    def test_binding_for_reports_single_binding(self) -> None:
        binding = self.matcher.binding_for(KeyEvent("k", meta=True, shift=True), Mode.NORMAL)
        self.assertEqual(binding.command, "move_block_up")
        self.assertTrue(binding.meta)
        self.assertIsNone(self.matcher.binding_for(KeyEvent("k"), Mode.HINT))


if __name__ == "__main__":
    unittest.main()
