from __future__ import annotations

import argparse
import csv
import json
from pathlib import Path

# OurAirports types that carry scheduled passenger traffic often enough to matter
DEFAULT_TYPES = ("large_airport", "medium_airport")
KEEP_FIELDS = ("iata_code", "name", "municipality", "iso_country")


def _read_csv(path: Path) -> list[dict]:
    with path.open("r", encoding="utf-8", newline="") as f:
        return list(csv.DictReader(f))


def _write_json(path: Path, rows: list[dict]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(rows, f, ensure_ascii=False, indent=1)


def build(airports_csv: Path, out_file: Path, types: tuple[str, ...] = DEFAULT_TYPES) -> int:
    rows: list[dict] = []
    seen: set[str] = set()
    for row in _read_csv(airports_csv):
        code = (row.get("iata_code") or "").strip().upper()
        if len(code) != 3 or not code.isalpha() or code in seen:
            continue
        if types and row.get("type") not in types:
            continue
        seen.add(code)
        record = {k: (row.get(k) or None) for k in KEEP_FIELDS}
        record["iata_code"] = code
        rows.append(record)

    rows.sort(key=lambda r: r["iata_code"])
    _write_json(out_file, rows)
    return len(rows)


def main() -> None:
    parser = argparse.ArgumentParser(description="Build the airport registry consumed by airport_flair.")
    parser.add_argument("--csv", default="data/airports.csv", help="OurAirports airports.csv")
    parser.add_argument("--out", default="data/airports_filtered.json")
    parser.add_argument("--type", action="append", default=[],
                        help="airport type to keep (repeatable, default large+medium)")
    args = parser.parse_args()

    count = build(Path(args.csv), Path(args.out), tuple(args.type) or DEFAULT_TYPES)
    print(f"Wrote {count} airports to {args.out}")


if __name__ == "__main__":
    main()
