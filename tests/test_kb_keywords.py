"""Unit tests for question keyword extraction."""

from __future__ import annotations

import unittest
from pathlib import Path
import sys


PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from service_bot.knowledge_base.keywords import extract_keywords  # noqa: E402


class TestExtractKeywords(unittest.TestCase):
    """Tests for `extract_keywords`."""

    def test_warranty_question(self) -> None:
        """Drops the stop word 'is' and tokens of three characters or fewer."""
        self.assertEqual(
            extract_keywords("What is your warranty policy?"),
            {"what", "your", "warranty", "policy"},
        )

    def test_strips_punctuation_inside_words(self) -> None:
        self.assertEqual(
            extract_keywords("The device's battery isn't charging!!"),
            {"devices", "battery", "isnt", "charging"},
        )

    def test_deduplicates_case_insensitively(self) -> None:
        self.assertEqual(extract_keywords("Reset reset RESET now"), {"reset"})

    def test_long_stop_word_is_removed(self) -> None:
        """'with' is long enough to survive the length rule but is a stop word."""
        self.assertEqual(extract_keywords("Works with wi_fi"), {"works", "wi_fi"})

    def test_blank_question_has_no_keywords(self) -> None:
        self.assertEqual(extract_keywords("   ?! "), set())


if __name__ == "__main__":
    unittest.main()
