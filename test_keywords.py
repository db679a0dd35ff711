"""
Unit tests for viewing_analytics.keywords
"""

import unittest

from viewing_analytics.keywords import KeywordIndex, analyze_keywords, tokenize
from viewing_analytics.models import Entry


def make_entry(title, value, category="Movie", genre="Drama", language="English", summary=""):
    return Entry(category=category, language=language, genres=(genre,), primary_genre=genre,
                 metric_value=value, title=title, summary=summary)


class TestTokenize(unittest.TestCase):
    """Test cases for tokenize"""

    def test_splits_and_filters(self):
        self.assertEqual(tokenize("The Dark-Knight: Rises!"), ["dark", "knight", "rises"])

    def test_drops_short_and_numeric_tokens(self):
        self.assertEqual(tokenize("Run 2049 to run"), [])
        self.assertEqual(tokenize("Ocean's Eleven"), ["ocean", "eleven"])

    def test_splits_on_any_punctuation(self):
        self.assertEqual(tokenize("Cats/Dogs & Mice+Rats"), ["cats", "dogs", "mice", "rats"])

    def test_empty(self):
        self.assertEqual(tokenize(""), [])
        self.assertEqual(tokenize(None), [])


class TestKeywordIndex(unittest.TestCase):
    """Test cases for analyze_keywords / KeywordIndex.top_keywords"""

    def test_weighted_ranking(self):
        index = analyze_keywords([
            make_entry("Ocean Heist Ocean", 10),
            make_entry("Desert Heist", 30),
        ])
        table = index.table_for("Movie", "Drama")
        self.assertEqual(table["heist"], {"count": 2, "weight": 40.0})
        self.assertEqual(table["ocean"], {"count": 2, "weight": 20.0})
        self.assertEqual(index.top_keywords("Movie", "Drama"), ["heist", "desert", "ocean"])

    def test_limit(self):
        index = analyze_keywords([make_entry("Ocean Heist Desert Crew", 1)])
        self.assertEqual(len(index.top_keywords("Movie", "Drama", limit=2)), 2)

    def test_stop_and_language_words_removed(self):
        index = analyze_keywords([make_entry("Stranger Things Season Korean", 5, category="TV")])
        self.assertEqual(index.top_keywords("TV", "Drama"), ["stranger", "things"])

    def test_single_word_title_suppressed(self):
        index = analyze_keywords([make_entry("Inception", 100)])
        self.assertEqual(index.top_keywords("Movie", "Drama"), [])

    def test_genre_name_excluded(self):
        index = analyze_keywords([make_entry("Drama Queens Club", 5)])
        self.assertNotIn("drama", index.top_keywords("Movie", "Drama", limit=5))
        self.assertEqual(index.top_keywords("Movie", "Drama"), ["queens", "club"])

    def test_language_table_and_fallback(self):
        index = analyze_keywords([
            make_entry("Paris Bakery", 5, language="French"),
            make_entry("Texas Ranch", 50),
        ])
        self.assertEqual(index.top_keywords("Movie", "Drama", "French"), ["paris", "bakery"])
        # no German table: falls back to the whole genre
        self.assertEqual(index.top_keywords("Movie", "Drama", "German"),
                         ["texas", "ranch", "paris"])

    def test_ties_keep_insertion_order(self):
        index = analyze_keywords([make_entry("Alpha Bravo Charlie", 1)])
        self.assertEqual(index.top_keywords("Movie", "Drama"), ["alpha", "bravo", "charlie"])
        self.assertEqual(index.top_keywords("Movie", "Drama"), index.top_keywords("Movie", "Drama"))

    def test_long_form_summary_is_stripped_and_used(self):
        summary = "<p>A <b>haunted</b> lighthouse</p>"
        index = analyze_keywords([
            make_entry("Beacon Point", 2, category="TV", genre="Mystery", summary=summary),
            make_entry("Beacon Point", 2, category="Movie", genre="Mystery", summary=summary),
        ])
        tv_words = set(index.table_for("TV", "Mystery"))
        movie_words = set(index.table_for("Movie", "Mystery"))
        self.assertEqual(tv_words, {"haunted", "lighthouse", "beacon", "point"})
        self.assertEqual(movie_words, {"beacon", "point"})

    def test_unknown_slice(self):
        index = analyze_keywords([])
        self.assertEqual(len(index), 0)
        self.assertEqual(index.top_keywords("Movie", "Western"), [])

    def test_entry_without_text_adds_no_table(self):
        index = analyze_keywords([make_entry("", 10)])
        self.assertIsNone(index.table_for("Movie", "Drama"))

    def test_add_without_language(self):
        index = KeywordIndex()
        index.add(make_entry("Ocean Heist", 3, language=""), ["ocean", "heist"])
        self.assertEqual(len(index), 1)
        self.assertEqual(index.top_keywords("Movie", "Drama", "English"), ["ocean", "heist"])


if __name__ == '__main__':
    unittest.main()
