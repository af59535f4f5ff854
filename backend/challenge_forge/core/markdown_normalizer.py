"""Markdown Normalizer — rewrites semi-structured model prose into well-formed tables and fences.

Invariants:
    - All functions are PURE: text in, text out
    - Transforms run in order: (a) table cell spacing, (b) missing header separator rows,
      (c) cell spacing inside SQL fences, (d) line break after a closing fence,
      (e) SQL keyword upper-casing inside SQL fences
    - Each transform is idempotent on its own; normalize_markdown() runs the pipeline to a
      fixpoint so normalize_markdown(normalize_markdown(x)) == normalize_markdown(x)
    - Fence lines are never rewritten by the table transforms
    - Keyword upper-casing skips quoted literals, comments and result-table rows

Design Decisions:
    - Line-based region classification (prose / fence / SQL block / other code block)
      shared by all transforms (ADR: one notion of "inside a fence")
    - Code blocks in other languages are left byte-for-byte alone: indentation and pipes
      mean something there
"""

import re
from collections.abc import Callable
from enum import Enum

_MAX_PASSES = 4

_TABLE_ROW = re.compile(r"^\s*\|.*\|\s*$")
_SEPARATOR_CELL = re.compile(r"^:?-+:?$")
_FENCE_LINE = re.compile(r"^(\s*)(`{3,})(.*)$")
_SQL_DIALECTS = frozenset({
    "sql", "mysql", "postgresql", "postgres", "psql", "sqlite", "plsql",
    "tsql", "mssql", "mariadb",
})
_SQL_KEYWORDS = (
    "select", "from", "where", "join", "inner", "left", "right", "full", "outer",
    "cross", "on", "group", "by", "order", "having", "limit", "offset", "insert",
    "into", "values", "update", "set", "delete", "create", "table", "alter",
    "drop", "index", "primary", "key", "foreign", "references", "and", "or",
    "not", "null", "is", "in", "as", "distinct", "union", "all", "between",
    "like", "exists", "case", "when", "then", "else", "end", "asc", "desc",
    "count", "sum", "avg", "min", "max", "with", "over", "partition",
)
_KEYWORD = re.compile(r"\b(" + "|".join(_SQL_KEYWORDS) + r")\b", re.IGNORECASE)
_PROTECTED_SQL = re.compile(
    r"('(?:[^'\\]|\\.)*'|\"(?:[^\"\\]|\\.)*\"|`[^`]*`|--.*$)",
)

Transform = Callable[[str], str]


class Region(str, Enum):
    PROSE = "prose"
    FENCE = "fence"
    SQL = "sql"
    CODE = "code"


def normalize_markdown(text: str) -> str:
    """Apply every transform in order until the text stops changing."""
    for _ in range(_MAX_PASSES):
        result = text
        for transform in MARKDOWN_TRANSFORMS:
            result = transform(result)
        if result == text:
            break
        text = result
    return text


# --- Region classification ------------------------------------------------------

def classify_lines(lines: list[str]) -> list[Region]:
    """Region of every line; fence lines (opening and closing) are FENCE."""
    regions: list[Region] = []
    open_fence: str | None = None
    is_sql = False
    for line in lines:
        fence = _FENCE_LINE.match(line)
        if open_fence is None:
            if fence:
                open_fence = fence.group(2)
                info = fence.group(3).strip().lower().split()
                is_sql = bool(info) and info[0] in _SQL_DIALECTS
                regions.append(Region.FENCE)
            else:
                regions.append(Region.PROSE)
        elif fence and len(fence.group(2)) >= len(open_fence):
            open_fence = None
            regions.append(Region.FENCE)
        else:
            regions.append(Region.SQL if is_sql else Region.CODE)
    return regions


# --- (a) / (c) table cell spacing ----------------------------------------------

def _split_cells(line: str) -> list[str]:
    return [cell.strip() for cell in line.strip()[1:-1].split("|")]


def _format_row(line: str, cells: list[str]) -> str:
    indent = line[:len(line) - len(line.lstrip())]
    return indent + "| " + " | ".join(cells) + " |"


def _is_separator_row(line: str) -> bool:
    cells = _split_cells(line)
    return bool(cells) and all(_SEPARATOR_CELL.match(c) for c in cells)


def _normalize_rows(text: str, region: Region) -> str:
    lines = text.split("\n")
    regions = classify_lines(lines)
    for i, line in enumerate(lines):
        if regions[i] is region and _TABLE_ROW.match(line):
            lines[i] = _format_row(line, _split_cells(line))
    return "\n".join(lines)


def normalize_table_spacing(text: str) -> str:
    """(a) One space on each side of every cell delimiter in prose tables."""
    return _normalize_rows(text, Region.PROSE)


def normalize_sql_block_tables(text: str) -> str:
    """(c) Same spacing for result tables inside SQL fences; fences untouched."""
    return _normalize_rows(text, Region.SQL)


# --- (b) header separator rows -------------------------------------------------

def insert_missing_separators(text: str) -> str:
    """(b) Add a `| --- |` row between a header row and a data row that lacks one."""
    lines = text.split("\n")
    regions = classify_lines(lines)
    out: list[str] = []
    for i, line in enumerate(lines):
        out.append(line)
        if regions[i] is not Region.PROSE or not _TABLE_ROW.match(line):
            continue
        starts_table = i == 0 or not (
            regions[i - 1] is Region.PROSE and _TABLE_ROW.match(lines[i - 1])
        )
        if not starts_table or i + 1 >= len(lines):
            continue
        nxt = lines[i + 1]
        if regions[i + 1] is Region.PROSE and _TABLE_ROW.match(nxt) and not _is_separator_row(nxt):
            columns = len(_split_cells(line))
            out.append(_format_row(line, ["---"] * columns))
    return "\n".join(out)


# --- (d) line break after closing fence ------------------------------------------

def break_after_closing_fence(text: str) -> str:
    """(d) Move code or prose glued to a closing fence onto their own lines.

    A line closes the open fence only when the fence run starts it (after indentation)
    or ends it; a fence run in the middle of a code line is literal code.
    """
    lines = text.split("\n")
    out: list[str] = []
    open_fence: str | None = None
    for line in lines:
        if open_fence is None:
            fence = _FENCE_LINE.match(line)
            if fence:
                open_fence = fence.group(2)
            out.append(line)
            continue
        stripped = line.lstrip()
        body = line.rstrip()
        if stripped.startswith(open_fence):
            indent = line[:len(line) - len(stripped)]
            marker_end = len(stripped) - len(stripped.lstrip("`"))
            out.append(indent + stripped[:marker_end])
            tail = stripped[marker_end:]
            if tail.strip():
                out.append(tail.strip())
        elif body.endswith(open_fence):
            marker_start = len(body.rstrip("`"))
            out.append(body[:marker_start].rstrip())
            out.append(body[marker_start:])
        else:
            out.append(line)
            continue
        open_fence = None
    return "\n".join(out)


# --- (e) SQL keywords ----------------------------------------------------------

def _uppercase_keywords(line: str) -> str:
    parts = _PROTECTED_SQL.split(line)
    # split() with one capture group: odd indices are the protected segments
    for i in range(0, len(parts), 2):
        parts[i] = _KEYWORD.sub(lambda m: m.group(1).upper(), parts[i])
    return "".join(parts)


def uppercase_sql_keywords(text: str) -> str:
    """(e) Upper-case reserved words token-wise inside SQL fences."""
    lines = text.split("\n")
    regions = classify_lines(lines)
    for i, line in enumerate(lines):
        if regions[i] is Region.SQL and not _TABLE_ROW.match(line):
            lines[i] = _uppercase_keywords(line)
    return "\n".join(lines)


MARKDOWN_TRANSFORMS: tuple[Transform, ...] = (
    normalize_table_spacing,
    insert_missing_separators,
    normalize_sql_block_tables,
    break_after_closing_fence,
    uppercase_sql_keywords,
)
