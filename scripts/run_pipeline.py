"""
Run the catalog analytics pipeline over movie/TV CSV exports.

Usage:
    python scripts/run_pipeline.py --movies data/NetflixMovies_enriched.csv \
        --tv data/NetflixTV_enriched.csv --metric-mode hours --seed 42 --output data/views.json
"""
import argparse
import json
import logging
from pathlib import Path

import pandas as pd
from tabulate import tabulate

from viewing_analytics import CatalogAnalyticsPipeline
from viewing_analytics.config import CATEGORIES, INIT_STRATEGIES, MOVIE, TV, VALUE_FIELDS
from viewing_analytics.utils import describe_slice, format_share, format_value


def load_records(path):
    """Read a CSV as plain string cells (empty cells stay '')."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"CSV not found: {path}")
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    print(f"Loaded {len(df)} rows from {path}")
    return df.to_dict("records")


def hierarchy_table(result, metric_mode, top_n=10):
    total = result.total_value
    rows = []
    for (category, genre, language), value in sorted(result.aggregates.items(), key=lambda kv: kv[1], reverse=True)[:top_n]:
        rows.append([
            category, genre, language, format_value(value), format_share(value, total),
            ", ".join(result.keywords.top_keywords(category, genre, language)),
        ])
    headers = ["Type", "Genre", "Language", metric_mode.title(), "Share %", "Top keywords"]
    return tabulate(rows, headers=headers, tablefmt="github")


def cluster_table(model):
    rows = [
        [c.index, c.label, f"{c.x:.2f}", f"{c.y:.2f}", c.count, format_value(c.total_metric),
         ", ".join(c.top_genres), f"{c.mean_ratio:.2f}" if c.mean_ratio is not None else "n/a"]
        for c in model.clusters
    ]
    headers = ["#", "Quadrant", "x", "y", "Titles", "Hours", "Top genres", "Hours/view"]
    return tabulate(rows, headers=headers, tablefmt="github")


def to_json(result):
    clusters = None
    if result.clusters is not None:
        clusters = {
            "points": [
                {
                    "title": p.entry.title,
                    "type": p.entry.category,
                    "genre": p.entry.primary_genre,
                    "language": p.entry.language,
                    "country": p.entry.country,
                    "releaseYear": p.entry.release_year or "",
                    "runtime": p.entry.runtime_minutes,
                    "poster": p.entry.poster_url or "",
                    "hours": p.metric_a,
                    "views": p.metric_b,
                    "hoursPerView": p.ratio,
                    "x": p.x,
                    "y": p.y,
                    "cluster": p.cluster,
                    "size": p.size,
                }
                for p in result.clusters.points
            ],
            "clusters": [c._asdict() for c in result.clusters.clusters],
        }
    return {
        "hierarchy": result.hierarchy.to_dict(),
        "totalValue": result.total_value,
        "matrix": clusters,
    }


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--movies", help="CSV of single-release titles")
    ap.add_argument("--tv", help="CSV of episodic titles")
    ap.add_argument("--metric-mode", default="hours", choices=sorted(VALUE_FIELDS))
    ap.add_argument("--no-split-genres", action="store_true", help="Attribute each title to its first genre only")
    ap.add_argument("--collapse-duplicate-genres", action="store_true")
    ap.add_argument("--clusters", type=int, default=4)
    ap.add_argument("--init", default="random", choices=INIT_STRATEGIES)
    ap.add_argument("--seed", type=int, default=None)
    ap.add_argument("--top", type=int, default=10, help="Rows in the leaf summary table")
    ap.add_argument("--output", help="Optional JSON output path")
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.movies and not args.tv:
        ap.error("pass at least one of --movies / --tv")

    records = {}
    for category, path in zip(CATEGORIES, (args.movies, args.tv)):
        if path:
            records[category] = load_records(path)

    pipeline = CatalogAnalyticsPipeline(
        metric_mode=args.metric_mode,
        split_genres=not args.no_split_genres,
        cluster_count=args.clusters,
        random_state=args.seed,
        init=args.init,
        collapse_duplicate_genres=args.collapse_duplicate_genres,
    )
    result = pipeline.run(records)

    unit = "hours" if args.metric_mode == "hours" else "streams"
    print(f"\nTotal data: {format_value(result.total_value).replace('B', ' billion')} {unit}")
    for category in (MOVIE, TV):
        node = result.hierarchy.find(category)
        if node is not None:
            share = format_share(node.total(), result.total_value)
            print(f"  {share}% {describe_slice(category, metric_mode=args.metric_mode)}")

    print("\nTop leaf buckets:")
    print(hierarchy_table(result, args.metric_mode, args.top))

    if result.clusters is None:
        print("\nNo titles carry both hours and views; engagement matrix skipped.")
    else:
        print(f"\nEngagement clusters ({len(result.clusters.points)} titles):")
        print(cluster_table(result.clusters))

    if args.output:
        out = Path(args.output)
        out.parent.mkdir(parents=True, exist_ok=True)
        with out.open("w", encoding="utf-8") as f:
            json.dump(to_json(result), f, indent=2)
        print(f"\nWrote: {out}")


if __name__ == "__main__":
    main()
