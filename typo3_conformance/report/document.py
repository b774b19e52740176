"""
Report document model - structured view of a conformance report

The report is split around its summary table: the lines before it (head),
the table rows keyed by category label, the lines after it (tail) and the
sections queued for appending. Rows are upserted by key and the document is
serialised once, so edits never depend on each other's textual side effects.

Uses markdown-it-py to locate the summary table.
"""

import re
from dataclasses import dataclass, field
from typing import Optional

from markdown_it import MarkdownIt


SUMMARY_FIRST_HEADER = "Category"
TOTAL_KEY = "TOTAL"

DEFAULT_TABLE_HEADER = [
    "| Category | Score | Status |",
    "|----------|-------|--------|",
]

_EMPHASIS = re.compile(r"^\*\*(.*)\*\*$")

# Line breaks as markdown-it counts them for token.map
_NEWLINE = re.compile(r"\r\n?|\n")

# Column separator, escaped pipes stay inside the cell
_CELL_SEPARATOR = re.compile(r"(?<!\\)\|")


def row_key(label: str) -> str:
    """Key of a summary row: label without surrounding bold markers."""
    label = label.strip()
    match = _EMPHASIS.match(label)
    return (match.group(1) if match else label).strip()


def _split_cells(line: str) -> list[str]:
    stripped = line.strip()
    if stripped.startswith("|"):
        stripped = stripped[1:]
    if stripped.endswith("|") and not stripped.endswith("\\|"):
        stripped = stripped[:-1]
    return [cell.strip() for cell in _CELL_SEPARATOR.split(stripped)]


def _split_lines(text: str) -> list[str]:
    lines = _NEWLINE.split(text)
    if lines and lines[-1] == "":
        lines.pop()
    return lines


@dataclass
class SummaryRow:
    """
    One row of the summary table

    Attributes:
        label: Category label, possibly bold (**TOTAL**)
        score: Score cell text (18/20, **76/100**)
        status: Status cell text (✅ Passed)
        raw: Source line of a parsed row, written back unchanged
    """
    label: str
    score: str
    status: str
    raw: Optional[str] = field(default=None, compare=False, repr=False)

    @property
    def key(self) -> str:
        return row_key(self.label)

    @classmethod
    def from_line(cls, line: str) -> "SummaryRow":
        cells = _split_cells(line) + ["", "", ""]
        return cls(label=cells[0], score=cells[1], status=cells[2], raw=line)

    def render(self) -> str:
        if self.raw is not None:
            return self.raw
        return f"| {self.label} | {self.score} | {self.status} |"


@dataclass
class ReportDocument:
    """
    Parsed report

    Attributes:
        head: Lines before the summary table (the whole report when no table)
        table_header: Header and delimiter lines of the summary table
        rows: Summary rows in table order
        tail: Lines after the summary table
        appended: Markdown blocks appended on render
        newline: Line break of the source text, reused on render
    """
    head: list[str] = field(default_factory=list)
    table_header: list[str] = field(default_factory=list)
    rows: list[SummaryRow] = field(default_factory=list)
    tail: list[str] = field(default_factory=list)
    appended: list[str] = field(default_factory=list)
    trailing_newline: bool = True
    newline: str = "\n"

    @property
    def has_summary_table(self) -> bool:
        return bool(self.table_header)

    @classmethod
    def parse(cls, text: str) -> "ReportDocument":
        """
        Parse report markdown

        The summary table is the first table whose first header cell is
        "Category". Without one, the whole text becomes the head. Lines are
        split on the same breaks markdown-it counts, and the first break
        found sets the newline used on render.
        """
        lines = _split_lines(text)
        trailing_newline = text.endswith(("\n", "\r")) or not text
        first_break = _NEWLINE.search(text)
        newline = first_break.group(0) if first_break else "\n"
        span = _find_summary_table(text)

        if span is None:
            return cls(head=lines, trailing_newline=trailing_newline, newline=newline)

        start, end = span
        # only pipe-delimited lines belong to the table body
        body_end = start + 2
        while body_end < end and lines[body_end].lstrip().startswith("|"):
            body_end += 1
        end = body_end
        return cls(
            head=lines[:start],
            table_header=lines[start:start + 2],
            rows=[SummaryRow.from_line(line) for line in lines[start + 2:end]],
            tail=lines[end:],
            trailing_newline=trailing_newline,
            newline=newline,
        )

    def get_row(self, key: str) -> Optional[SummaryRow]:
        for row in self.rows:
            if row.key == key:
                return row
        return None

    def upsert_row(self, row: SummaryRow) -> bool:
        """
        Replace the row with the same key in place, or append it

        Returns:
            True when an existing row was replaced
        """
        for index, existing in enumerate(self.rows):
            if existing.key == row.key:
                self.rows[index] = row
                return True
        self.rows.append(row)
        return False

    def append_section(self, markdown: str) -> None:
        self.appended.append(markdown.strip("\n"))

    def _ordered_rows(self) -> list[SummaryRow]:
        # TOTAL always closes the table
        others = [r for r in self.rows if r.key != TOTAL_KEY]
        totals = [r for r in self.rows if r.key == TOTAL_KEY]
        return others + totals

    def render(self) -> str:
        lines = list(self.head)
        if self.has_summary_table:
            lines.extend(self.table_header)
            lines.extend(row.render() for row in self._ordered_rows())
        lines.extend(self.tail)

        eol = self.newline
        text = eol.join(lines)
        for block in self.appended:
            block = eol.join(block.split("\n"))
            text = f"{text}{eol}{eol}{block}" if text else block
        if self.trailing_newline or self.appended:
            text += eol
        return text


def _find_summary_table(text: str) -> Optional[tuple[int, int]]:
    """Line span [start, end) of the summary table, None when absent."""
    md = MarkdownIt("commonmark").enable("table")
    tokens = md.parse(text)

    for index, token in enumerate(tokens):
        if token.type != "table_open" or not token.map:
            continue
        first_cell = None
        for inner in tokens[index + 1:]:
            if inner.type == "inline":
                first_cell = inner.content.strip()
                break
            if inner.type == "table_close":
                break
        if first_cell == SUMMARY_FIRST_HEADER:
            return token.map[0], token.map[1]
    return None
