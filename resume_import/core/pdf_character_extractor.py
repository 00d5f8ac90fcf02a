"""
Coordinate-based reading-order reconstruction for PDF pages.

The PDF reader hands us positioned text runs (words or glyph strings) in
content-stream order, which rarely matches the visual order. Lines are rebuilt
geometrically:

1. Drop runs whose text is empty or whitespace-only
2. Flip the bottom-up PDF Y axis to top-down
3. Bucket runs by round(top / line_tolerance) so baseline jitter stays on one line
4. Buckets top to bottom, runs within a bucket left to right
5. Insert a space between neighbours only when the horizontal gap exceeds
   space_gap_ratio * glyph height; otherwise concatenate

Both thresholds are empirically tuned and exposed as settings.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List


@dataclass
class TextRun:
    """A positioned text fragment in PDF user space (origin bottom-left)."""
    text: str
    x: float
    y: float  # Baseline, measured from the bottom of the page
    width: float
    height: float
    font_size: float = 0.0

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def glyph_height(self) -> float:
        return self.height or self.font_size


def runs_from_words(words: Iterable[Dict[str, Any]], page_height: float) -> List[TextRun]:
    """
    Convert pdfplumber word dicts (top-down coordinates) into TextRuns.

    pdfplumber reports "top"/"bottom" from the top edge of the page; the run
    baseline is stored bottom-up so that every run source looks the same to
    reconstruct_page_text().
    """
    runs = []
    for w in words:
        runs.append(
            TextRun(
                text=w["text"],
                x=float(w["x0"]),
                y=float(page_height) - float(w["bottom"]),
                width=float(w["x1"]) - float(w["x0"]),
                height=float(w["bottom"]) - float(w["top"]),
                font_size=float(w.get("size") or 0.0),
            )
        )
    return runs


def group_runs_into_lines(
    runs: Iterable[TextRun],
    page_height: float,
    line_tolerance: float = 3.0,
) -> List[List[TextRun]]:
    """Bucket runs into visual lines, top of page first, each line sorted by X."""
    buckets: Dict[int, List[TextRun]] = {}
    for run in runs:
        if not run.text or not run.text.strip():
            continue
        top = page_height - run.y
        key = round(top / line_tolerance)
        buckets.setdefault(key, []).append(run)

    return [sorted(buckets[key], key=lambda r: r.x) for key in sorted(buckets)]


def join_line(line: List[TextRun], space_gap_ratio: float = 0.3) -> str:
    """Concatenate a sorted line of runs, spacing only across real gaps."""
    if not line:
        return ""

    parts = [line[0].text]
    for prev, run in zip(line, line[1:]):
        gap = run.x - prev.right
        if gap > space_gap_ratio * run.glyph_height:
            parts.append(" ")
        parts.append(run.text)
    return "".join(parts)


def reconstruct_page_text(
    runs: Iterable[TextRun],
    page_height: float,
    line_tolerance: float = 3.0,
    space_gap_ratio: float = 0.3,
) -> str:
    lines = group_runs_into_lines(runs, page_height, line_tolerance)
    return "\n".join(join_line(line, space_gap_ratio) for line in lines)


def reconstruct_document_text(pages: Iterable[str]) -> str:
    """Join page texts in page order with a blank line between pages."""
    return "\n\n".join(page for page in pages if page)
