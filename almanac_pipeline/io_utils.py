from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Tuple, Union
import json
from pathlib import Path

from .errors import AlmanacParseError, InvalidRangeError
from .range_map import MappingTable, Rule
from .chain import table_key

SEEDS_TABLE = "seeds"

@dataclass
class Almanac:
    seeds: List[int]
    tables: Dict[str, MappingTable] = field(default_factory=dict)

    def seed_ranges(self) -> List[Tuple[int, int]]:
        """Seeds read pairwise as (start, length)."""
        if len(self.seeds) % 2:
            raise InvalidRangeError(f"odd number of seed values ({len(self.seeds)}), cannot pair into ranges")
        return list(zip(self.seeds[0::2], self.seeds[1::2]))

def parse_row(text: str, lineno: int) -> List[int]:
    cells = []
    for tok in text.split():
        try:
            cells.append(int(tok))
        except ValueError:
            raise AlmanacParseError(f"expected integer but got {tok!r}", lineno) from None
    return cells

def parse_tables(lines: List[str]) -> Dict[str, Tuple[int, List[Tuple[int, List[int]]]]]:
    """Split text lines into named raw tables: name -> (header line, [(line, cells)])."""
    tables = {}
    current = None
    for lineno, raw in enumerate(lines, start=1):
        ln = raw.strip()
        if not ln:
            current = None
            continue
        if current is None:
            name, sep, rest = ln.partition(":")
            if not sep:
                raise AlmanacParseError(f"expected table name but got {ln!r}", lineno)
            name = name.strip()
            if name in tables:
                raise AlmanacParseError(f"duplicate table {name!r}", lineno)
            current = (lineno, [])
            tables[name] = current
            ln = rest.strip()
            if not ln:
                continue
        rows = current[1]
        cells = parse_row(ln, lineno)
        if rows and len(cells) != len(rows[0][1]):
            raise AlmanacParseError(
                f"row has {len(cells)} values, table rows have {len(rows[0][1])}", lineno
            )
        rows.append((lineno, cells))
    return tables

def parse_almanac(text: str) -> Almanac:
    raw = parse_tables(text.splitlines())
    if SEEDS_TABLE not in raw:
        raise AlmanacParseError("seeds table not found")
    header, seed_rows = raw.pop(SEEDS_TABLE)
    seeds = [v for (_, cells) in seed_rows for v in cells]
    if not seeds:
        raise AlmanacParseError("seeds table has no values", header)

    tables = {}
    for name, (_, rows) in raw.items():
        rules = []
        for lineno, cells in rows:
            if len(cells) != 3:
                raise AlmanacParseError(
                    f"map row needs 3 values (destination source length), got {len(cells)}", lineno
                )
            try:
                rules.append(Rule.from_row(cells))
            except InvalidRangeError as exc:
                raise AlmanacParseError(str(exc), lineno) from exc
        key = table_key(name)
        tables[key] = MappingTable(key, tuple(rules))
    return Almanac(seeds=seeds, tables=tables)

def load_almanac(path: Union[str, Path]) -> Almanac:
    return parse_almanac(Path(path).read_text(encoding="utf-8"))

def save_result_json(result, path: Union[str, Path]):
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(result.summary(), f, ensure_ascii=False, indent=2)
