#!/usr/bin/env python3
"""
Generate a lightweight ER diagram (Mermaid) from a sideloader schema document.

Each registered type becomes an entity listing its scalar properties and the
foreign-key fields its belongs-to associations produce. Has-many/belongs-to
pairs are drawn as one-to-many edges; ``through`` pairs as many-to-many edges.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from sideloader.naming import NamingService
from sideloader.schema import SchemaRegistry, load_registry


def build_mermaid(registry: SchemaRegistry, naming: NamingService) -> str:
    lines = ["erDiagram"]

    for type_name in registry:
        description = registry.describe(type_name)
        lines.append(f"    {type_name} {{")
        lines.append("        any id PK")
        for prop, kind in description.properties.items():
            lines.append(f"        {kind} {prop}")
        for assoc in description.belongs_to:
            lines.append(f"        any {naming.foreign_key_field(assoc.relation_name)} FK")
        lines.append("    }")

    seen_edges = set()
    for type_name in registry:
        description = registry.describe(type_name)
        for assoc in description.belongs_to:
            edge_key = (assoc.target_type, type_name, assoc.relation_name)
            if edge_key in seen_edges:
                continue
            seen_edges.add(edge_key)
            lines.append(
                f'    {assoc.target_type} ||--o{{ {type_name} : "{assoc.relation_name}"'
            )
        for assoc in description.has_many:
            if assoc.through is None:
                continue
            edge_key = tuple(sorted((type_name, assoc.target_type))) + (assoc.through,)
            if edge_key in seen_edges:
                continue
            seen_edges.add(edge_key)
            lines.append(
                f'    {type_name} }}o--o{{ {assoc.target_type} : "{assoc.through}"'
            )

    return "\n".join(lines)


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--schema",
        required=True,
        type=Path,
        help="Path to the schema document (YAML or JSON).",
    )
    parser.add_argument(
        "--output",
        default=Path("docs/ERD.mmd"),
        type=Path,
        help="Path of the generated Mermaid diagram.",
    )
    args = parser.parse_args()

    registry = load_registry(args.schema)
    args.output.parent.mkdir(parents=True, exist_ok=True)
    args.output.write_text(build_mermaid(registry, NamingService()), encoding="utf-8")


if __name__ == "__main__":
    main()
