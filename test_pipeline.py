"""
End-to-end tests for CatalogAnalyticsPipeline, slice highlights and display formatting
"""

import random
import unittest

import pandas as pd

from viewing_analytics import CatalogAnalyticsPipeline, run_pipeline
from viewing_analytics.highlights import build_slice_index, slice_examples
from viewing_analytics.utils import describe_slice, format_share, format_value, pluralize


def sample_records():
    movies = [
        {"Title": "Ocean Heist", "TMDBGenres": "Crime, Drama", "originalLanguage": "English",
         "Hours Viewed": "1,000", "Views": "500", "Runtime": "120", "ReleaseYear": "2021",
         "TMDBPoster": "https://img/1.jpg"},
        {"Title": "Desert Heist", "TMDBGenres": "Drama", "originalLanguage": "English",
         "Hours Viewed": "400", "Views": "100", "TMDBPoster": "https://img/2.jpg"},
        {"Title": "Quiet Garden", "TMDBGenres": "Drama", "originalLanguage": "French",
         "Hours Viewed": "50", "Views": "25", "Runtime": "100", "TMDBPoster": "https://img/3.jpg"},
    ]
    tv = [
        {"Title": "Beacon Point: Limited Series", "TMDBGenres": "Mystery", "originalLanguage": "English",
         "Hours Viewed": "2000", "Views": "400", "Runtime": "45",
         "summary": "<p>A <b>haunted</b> lighthouse</p>"},
    ]
    return {"Movie": movies, "TV": tv}


class TestCatalogAnalyticsPipeline(unittest.TestCase):
    """Test cases for the full pipeline"""

    def setUp(self):
        self.pipeline = CatalogAnalyticsPipeline(random_state=7)
        self.result = self.pipeline.run(sample_records())

    def test_init_validation(self):
        with self.assertRaises(ValueError):
            CatalogAnalyticsPipeline(metric_mode="likes")
        with self.assertRaises(ValueError):
            CatalogAnalyticsPipeline(init="kmeans++")
        with self.assertRaises(ValueError):
            CatalogAnalyticsPipeline(cluster_count=0)

    def test_requires_run(self):
        pipeline = CatalogAnalyticsPipeline()
        with self.assertRaises(RuntimeError):
            pipeline.top_keywords("Movie", "Drama")
        with self.assertRaises(RuntimeError):
            pipeline.slice_examples("Movie")

    def test_entries_and_fan_out(self):
        self.assertEqual(len(self.result.entries), 4)
        self.assertEqual(len(self.result.expanded), 5)
        self.assertEqual(self.result.total_value, 4450.0)

    def test_missing_fields_filled(self):
        desert = self.result.entries[1]
        self.assertEqual(desert.runtime_minutes, 110)
        self.assertEqual(desert.country, "United States")
        self.assertIsNone(desert.release_year)

    def test_aggregates_and_hierarchy(self):
        self.assertEqual(self.result.aggregates, {
            ("Movie", "Crime", "English"): 1000.0,
            ("Movie", "Drama", "English"): 1400.0,
            ("Movie", "Drama", "French"): 50.0,
            ("TV", "Mystery", "English"): 2000.0,
        })
        root = self.result.hierarchy
        self.assertEqual([c.name for c in root.children], ["Movie", "TV"])
        self.assertEqual(root.find("Movie").total(), 2450.0)
        self.assertEqual(root.total(), self.result.total_value)

    def test_keywords(self):
        self.assertEqual(self.pipeline.top_keywords("Movie", "Drama", "English"), ["heist", "ocean", "desert"])
        self.assertEqual(self.pipeline.top_keywords("TV", "Mystery"), ["haunted", "lighthouse", "beacon"])

    def test_clusters_use_source_rows(self):
        model = self.result.clusters
        self.assertEqual(len(model.points), 4)
        by_title = {p.entry.title: p for p in model.points}
        self.assertEqual(by_title["Ocean Heist"].metric_a, 1000.0)
        self.assertEqual(by_title["Desert Heist"].entry.runtime_minutes, 110)

    def test_slice_examples(self):
        picks = self.pipeline.slice_examples("Movie", "Drama", rng=random.Random(1))
        self.assertEqual({p["title"] for p in picks}, {"Ocean Heist", "Desert Heist", "Quiet Garden"})
        # the English slice exists but only holds two titles
        self.assertEqual(self.pipeline.slice_examples("Movie", "Drama", "English"), [])
        self.assertEqual(self.pipeline.slice_examples("TV"), [])
        self.assertEqual(len(self.pipeline.slice_examples("Movie", "Western")), 3)

    def test_views_mode_without_split(self):
        result = run_pipeline(sample_records(), metric_mode="views", split_genres=False, random_state=0)
        self.assertEqual(len(result.expanded), 4)
        self.assertEqual(result.total_value, 1025.0)
        self.assertEqual(result.aggregates[("Movie", "Crime", "English")], 500.0)

    def test_dataframe_records(self):
        records = {k: pd.DataFrame(v).to_dict("records") for k, v in sample_records().items()}
        result = run_pipeline(records, random_state=7)
        self.assertEqual(result.aggregates, self.result.aggregates)
        self.assertIsNone(result.entries[1].release_year)

    def test_no_dual_metrics(self):
        records = {"Movie": [{"Title": "Lonely Film", "Hours Viewed": "10"}]}
        result = run_pipeline(records)
        self.assertIsNone(result.clusters)
        self.assertEqual(result.total_value, 10.0)

    def test_empty_catalog(self):
        result = run_pipeline({})
        self.assertEqual(result.aggregates, {})
        self.assertEqual(result.hierarchy.children, [])
        self.assertIsNone(result.clusters)
        self.assertEqual(result.total_value, 0.0)


class TestSliceIndex(unittest.TestCase):
    """Test cases for build_slice_index"""

    def test_requires_title_and_poster(self):
        result = run_pipeline(sample_records())
        index = build_slice_index(result.expanded)
        self.assertNotIn(("TV",), index)
        # the two fan-out copies of Ocean Heist count once
        self.assertEqual(len(index[("Movie",)]), 3)
        self.assertEqual(slice_examples(index, "Movie", count=4), [])


class TestFormatting(unittest.TestCase):
    """Test cases for the display helpers"""

    def test_format_value(self):
        self.assertEqual(format_value(950), "950")
        self.assertEqual(format_value(1500), "1.5K")
        self.assertEqual(format_value(2000000), "2M")
        self.assertEqual(format_value(1.234e9), "1.23B")
        self.assertEqual(format_value(0), "0")
        self.assertEqual(format_value(None), "0")

    def test_format_share(self):
        self.assertEqual(format_share(25, 100), "25.0")
        self.assertEqual(format_share(0.05, 100), "<0.1")
        self.assertEqual(format_share(5, 0), "0.0")

    def test_pluralize(self):
        self.assertEqual(pluralize("Comedy"), "comedies")
        self.assertEqual(pluralize("Story"), "Stories")
        self.assertEqual(pluralize("Drama"), "Dramas")
        self.assertEqual(pluralize("Class"), "Classes")
        self.assertEqual(pluralize("sci-fi"), "sci-fi")

    def test_describe_slice(self):
        self.assertEqual(describe_slice("Movie", "Drama", "Korean"),
                         "of all viewing time went to Korean drama movies.")
        self.assertEqual(describe_slice("TV", "Comedy"), "of all viewing time went to TV comedies.")
        self.assertEqual(describe_slice("TV", metric_mode="views"), "of all streams came from TV shows.")
        self.assertEqual(describe_slice("TV", "Children"), "of all viewing time went to children's TV.")
        self.assertEqual(describe_slice("Movie", language="Korean"), "of all viewing time went to Korean movies.")
        self.assertEqual(describe_slice(), "of all viewing time went to all titles.")


if __name__ == '__main__':
    unittest.main()
