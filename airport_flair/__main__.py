"""CLI entrypoint for airport_flair."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from airport_flair.config import get_settings
from airport_flair.logging_config import setup_logging


def main() -> None:
    setup_logging()
    settings = get_settings().sources

    parser = argparse.ArgumentParser(prog="airport-flair")
    parser.add_argument("--primary", default=settings.primary_source,
                        help="airport list (path or URL)")
    parser.add_argument("--group", default=settings.group_source,
                        help="metro-area mapping (path or URL)")
    sub = parser.add_subparsers(dest="command", required=True)

    annotate_parser = sub.add_parser("annotate")
    annotate_parser.add_argument("file")
    annotate_parser.add_argument("-o", "--output", default=None)

    classify_parser = sub.add_parser("classify")
    classify_parser.add_argument("text")

    args = parser.parse_args()

    if args.command == "annotate":
        code = _annotate(args.primary, args.group, args.file, args.output)
    else:
        code = _classify(args.primary, args.group, args.text)
    sys.exit(code)


def _read_sources(primary: str, group: str):
    from airport_flair.sources import read_optional

    return read_optional(primary), read_optional(group)


def _report_load(result) -> bool:
    """Print why the registry failed to load. Returns True when it loaded."""
    if not result.primary_loaded:
        print(f"Registry failed to load: {'; '.join(result.errors)}", file=sys.stderr)
    return result.primary_loaded


def _load_registry(primary: str, group: str):
    from airport_flair.registry import load

    return load(*_read_sources(primary, group))


def _annotate(primary: str, group: str, file: str, output: str | None) -> int:
    from airport_flair.document import LiveDocument
    from airport_flair.engine import FlairEngine

    engine = FlairEngine()
    if not _report_load(engine.initialize(*_read_sources(primary, group))):
        return 1

    document = LiveDocument.parse(Path(file).read_text(encoding="utf-8"))
    replaced = engine.attach(document)
    engine.teardown()

    html = document.render()
    if output:
        Path(output).write_text(html, encoding="utf-8")
        print(f"Annotated {replaced} text blocks -> {output}", file=sys.stderr)
    else:
        print(html)
    return 0


def _classify(primary: str, group: str, text: str) -> int:
    from airport_flair.classifier import Classifier
    from airport_flair.matcher import iter_occurrences

    result = _load_registry(primary, group)
    if not _report_load(result):
        return 1

    classifier = Classifier(result.registry)
    rows = []
    for occ in iter_occurrences(text):
        decision = classifier.classify(occ)
        rows.append({
            "text": occ.raw_text,
            "start": occ.start,
            "end": occ.end,
            "decision": decision.kind.value,
            "group": decision.is_group,
            "name": decision.entry.display_name if decision.entry else None,
        })
    print(json.dumps(rows, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    main()
