from __future__ import annotations

import argparse
import dataclasses
import json
import sys
from pathlib import Path
from typing import Any, List, Optional, Sequence

from dotenv import load_dotenv
from rich.console import Console

from .config import Settings
from .errors import SideloaderError
from .logging_utils import get_logger, setup_logging
from .schema import load_registry
from .serializer import Serializer

console = Console(stderr=True)
LOGGER = get_logger()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sideloader",
        description="Flatten nested JSON records into a side-loaded document.",
    )
    parser.add_argument(
        "inputs", nargs="+", type=Path, help="JSON files holding records to ingest."
    )
    parser.add_argument(
        "--schema",
        type=Path,
        default=None,
        help="Schema document (YAML or JSON). Defaults to $SIDELOADER_SCHEMA.",
    )
    parser.add_argument(
        "--output", type=Path, default=None, help="Write the document here instead of stdout."
    )
    parser.add_argument("--indent", type=int, default=None, help="JSON indentation.")
    return parser


def load_config(args: argparse.Namespace) -> Settings:
    """Merge environment settings with command line overrides."""
    load_dotenv()
    settings = Settings.from_env()
    overrides: dict[str, Any] = {}
    if args.schema is not None:
        overrides["schema_path"] = args.schema
    if args.indent is not None:
        overrides["json_indent"] = max(0, args.indent)
    settings = dataclasses.replace(settings, **overrides)
    if settings.schema_path is None:
        raise RuntimeError("A schema is required: pass --schema or set SIDELOADER_SCHEMA")
    return settings


def read_records(path: Path) -> List[Any]:
    payload = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(payload, dict) and isinstance(payload.get("records"), list):
        return payload["records"]
    if isinstance(payload, list):
        return payload
    return [payload]


def run(settings: Settings, inputs: Sequence[Path], output: Optional[Path]) -> None:
    registry = load_registry(settings.schema_path)
    serializer = Serializer(registry, settings=settings)

    ingested = 0
    with console.status("Ingesting records...") as status:
        for path in inputs:
            records = read_records(path)
            serializer.ingest(records)
            ingested += len(records)
            status.update(f"Ingested {ingested} records from {path.name}")
        document = serializer.serialize()

    text = json.dumps(document, indent=settings.json_indent or None, default=str)
    if output is None:
        sys.stdout.write(text + "\n")
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text + "\n", encoding="utf-8")

    LOGGER.info(
        "Serialized %s top-level records into %s types",
        ingested,
        len(document),
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    try:
        settings = load_config(args)
    except Exception as exc:
        setup_logging("INFO", console)
        LOGGER.error("Configuration error: %s", exc)
        print(f"Configuration error: {exc}", file=sys.stderr)
        sys.exit(1)

    setup_logging(settings.log_level, console)
    try:
        run(settings, args.inputs, args.output)
    except (SideloaderError, json.JSONDecodeError, OSError) as exc:
        LOGGER.exception("Could not serialize input")
        print(f"Input error: {exc}", file=sys.stderr)
        sys.exit(2)
    except Exception as exc:  # pragma: no cover - guard for CLI usage
        LOGGER.exception("Serialization failed")
        print(f"Serialization failed: {exc}", file=sys.stderr)
        sys.exit(3)


if __name__ == "__main__":
    main()
