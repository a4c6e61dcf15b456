#!/usr/bin/env python3
"""
Time ingestion, resolution and assembly on a synthetic blog graph.

Resolution scans every record of the target type for every record of the
source type, so its cost grows with the product of the two type sizes. The
report makes that visible across a few graph sizes.
"""

import argparse
import time
from datetime import datetime
from pathlib import Path

from sideloader.assembler import assemble
from sideloader.ingest import MergeEngine
from sideloader.resolver import RelationshipResolver
from sideloader.schema import SchemaRegistry
from sideloader.store import NormalizedStore

DEFAULT_OUTPUT = Path("docs/benchmark_report.md")
DEFAULT_SIZES = (100, 500, 1000)

SCHEMA = {
    "types": {
        "Author": {
            "properties": {"name": "string"},
            "associations": {"hasMany": {"posts": {"model": "Post"}}},
        },
        "Post": {
            "properties": {"title": "string", "published": "datetime"},
            "associations": {
                "belongsTo": {"author": {"model": "Author"}},
                "hasMany": {"tags": {"model": "Tag", "through": "tagging"}},
            },
        },
        "Tag": {
            "properties": {"label": "string"},
            "associations": {
                "hasMany": {"posts": {"model": "Post", "through": "tagging"}}
            },
        },
    }
}


def build_posts(count: int):
    """Posts reference authors by id and embed their tags."""
    authors = max(1, count // 10)
    tags = max(1, count // 20)
    return [
        {
            "type": "Post",
            "id": i,
            "title": f"Post {i}",
            "published": "2024-01-01T00:00:00Z",
            "authorId": i % authors,
            "tags": [{"id": (i + k) % tags, "label": f"tag-{(i + k) % tags}"} for k in range(3)],
        }
        for i in range(count)
    ] + [{"type": "Author", "id": a, "name": f"Author {a}"} for a in range(authors)]


def run_benchmark(sizes, output_file: Path):
    registry = SchemaRegistry.from_dict(SCHEMA)
    results = []

    for size in sizes:
        payload = build_posts(size)
        store = NormalizedStore()

        t0 = time.perf_counter()
        MergeEngine(store, registry).ingest(payload)
        t1 = time.perf_counter()
        links = RelationshipResolver(registry).resolve(store)
        t2 = time.perf_counter()
        document = assemble(store)
        t3 = time.perf_counter()

        results.append(
            {
                "size": size,
                "records": len(store),
                "links": links,
                "types": len(document),
                "ingest_ms": (t1 - t0) * 1000,
                "resolve_ms": (t2 - t1) * 1000,
                "assemble_ms": (t3 - t2) * 1000,
            }
        )
        print(f"{size:>6} posts: resolve {results[-1]['resolve_ms']:.1f} ms")

    lines = [
        "# Serializer Benchmark",
        "",
        f"Generated {datetime.now().isoformat(timespec='seconds')}",
        "",
        "| Posts | Records | Links added | Ingest (ms) | Resolve (ms) | Assemble (ms) |",
        "|---:|---:|---:|---:|---:|---:|",
    ]
    for row in results:
        lines.append(
            f"| {row['size']} | {row['records']} | {row['links']} | "
            f"{row['ingest_ms']:.1f} | {row['resolve_ms']:.1f} | {row['assemble_ms']:.1f} |"
        )

    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_text("\n".join(lines) + "\n", encoding="utf-8")
    print(f"Report written to {output_file}")


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--output", type=Path, default=DEFAULT_OUTPUT)
    parser.add_argument("--sizes", type=int, nargs="+", default=list(DEFAULT_SIZES))
    args = parser.parse_args()
    run_benchmark(args.sizes, args.output)


if __name__ == "__main__":
    main()
