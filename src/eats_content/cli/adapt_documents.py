"""CLI command that normalizes exported content-store documents and reports outcomes."""

from __future__ import annotations

import argparse
from dataclasses import replace
import json
import logging
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from eats_content.config import AdapterSettings
from eats_content.recipes.adapter import build_adapter
from eats_content.recipes.encoding import to_blob_document
from eats_content.recipes.models import CanonicalRecipe
from eats_content.recipes.outcome import ConversionOutcome, Success

LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_BAD_INPUT = 2


def _collect_inputs(target: Path) -> list[Path]:
    if target.is_file():
        return [target]
    if target.is_dir():
        return sorted(path for path in target.rglob("*.json") if path.is_file())
    return []


def _load_documents(path: Path) -> list[Any]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, list):
        return data
    return [data]


def _outcome_entry(source: Path, index: int, outcome: ConversionOutcome) -> dict[str, object]:
    if isinstance(outcome, Success):
        recipe = outcome.recipe
        return {
            "source_path": str(source),
            "index": index,
            "status": "success",
            "id": recipe.id,
            "slug": recipe.slug,
            "title": recipe.title,
            "source_variant": recipe.source_variant.value,
            "legacy_fields": list(recipe.legacy_fields),
        }
    return {
        "source_path": str(source),
        "index": index,
        "status": "failure",
        "kind": outcome.kind.value,
        "message": outcome.message,
        "paths": outcome.paths,
    }


def _export_blob(directory: Path, recipe: CanonicalRecipe) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    target = directory / f"{recipe.slug}.json"
    target.write_text(json.dumps(to_blob_document(recipe), ensure_ascii=False, indent=2), encoding="utf-8")
    return target


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    parser = argparse.ArgumentParser(description="Normalize content-store recipe documents")
    parser.add_argument("--path", required=True, help="JSON file or directory of JSON files")
    parser.add_argument("--capacity", type=int, default=None, help="Telemetry ring buffer capacity")
    parser.add_argument("--export-blobs", default=None, help="Directory to write successful recipes as blob documents")
    args = parser.parse_args(argv)

    try:
        settings = AdapterSettings.from_env()
        if args.capacity is not None:
            if args.capacity < 1:
                raise ValueError("--capacity must be >= 1")
            settings = replace(settings, telemetry_capacity=args.capacity)
    except ValueError as exc:
        parser.error(str(exc))

    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=settings.log_level,
    )

    source_path = Path(args.path)
    export_dir = Path(args.export_blobs) if args.export_blobs else None
    adapter = build_adapter(settings)

    results: list[dict[str, object]] = []
    errors: list[dict[str, str]] = []
    files = _collect_inputs(source_path)
    if not files:
        errors.append({"source_path": str(source_path), "error": "No JSON documents found"})

    for file_path in files:
        try:
            documents = _load_documents(file_path)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            LOGGER.warning("Failed to read documents from %s: %s", file_path, exc)
            errors.append({"source_path": str(file_path), "error": str(exc)})
            continue

        for index, outcome in enumerate(adapter.adapt_many(documents)):
            entry = _outcome_entry(file_path, index, outcome)
            if export_dir is not None and isinstance(outcome, Success):
                entry["exported_to"] = str(_export_blob(export_dir, outcome.recipe))
            results.append(entry)

    succeeded = sum(1 for entry in results if entry["status"] == "success")
    payload = {
        "path": str(source_path),
        "processed": len(results),
        "succeeded": succeeded,
        "failed": len(results) - succeeded,
        "results": results,
        "errors": errors,
        "telemetry": adapter.recorder.snapshot().to_dict(),
    }
    print(json.dumps(payload, ensure_ascii=True, indent=2))

    if errors:
        return EXIT_BAD_INPUT
    return EXIT_OK if succeeded == len(results) else EXIT_FAILURES


if __name__ == "__main__":
    raise SystemExit(main())
