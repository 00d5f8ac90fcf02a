"""
Skills section parser.

Not a state machine: every line of a skills block is classified on its own.

- "Category (item1, item2)" -> the category and each item are skills
- "a, b; c" -> split on commas / semicolons / pipes
- a short single line -> the whole line is one skill

Tokens must be 2-59 characters and not purely numeric. When the line pass
yields fewer than `fallback_threshold` skills, the fallback keyword table is
scanned across the whole block and its hits appended.
"""

import re
from typing import List, Optional

from resume_import.core.diagnostics import DiagnosticSink, resolve_sink
from resume_import.core.heuristics import DEFAULT_TABLES, HeuristicTables, header_family, strip_header
from resume_import.core.pattern_extractors import strip_bullet


MIN_SKILL_LEN = 2
MAX_SKILL_LEN = 59

GROUP_RE = re.compile(r"(?P<category>[^(),;|]+?)\s*\((?P<items>[^)]*)\)")
LABEL_RE = re.compile(r"^[A-Z][A-Za-z /&+-]{1,30}:\s*(?=\S)")
SEPARATOR_RE = re.compile(r"\s*[,;|]\s*")
NUMERIC_RE = re.compile(r"^[\d\s.,%+/-]+$")
_TRIM = " \t•-–:"


def _valid_skill(token: str) -> bool:
    return MIN_SKILL_LEN <= len(token) <= MAX_SKILL_LEN and not NUMERIC_RE.match(token)


def skills_from_line(line: str) -> List[str]:
    """
    Examples:
        "Languages: Python, Go; Rust" -> ["Python", "Go", "Rust"]
        "Cloud (AWS, GCP)" -> ["Cloud", "AWS", "GCP"]
        "Kubernetes" -> ["Kubernetes"]
    """
    bullet = strip_bullet(line)
    line = (bullet if bullet is not None else line).strip()
    line = LABEL_RE.sub("", line)
    if not line:
        return []

    tokens: List[str] = []
    if GROUP_RE.search(line):
        for m in GROUP_RE.finditer(line):
            tokens.append(m.group("category"))
            tokens.extend(SEPARATOR_RE.split(m.group("items")))
        leftover = GROUP_RE.sub(",", line)
        tokens.extend(SEPARATOR_RE.split(leftover))
    elif SEPARATOR_RE.search(line):
        tokens.extend(SEPARATOR_RE.split(line))
    else:
        tokens.append(line)

    cleaned = [t.strip(_TRIM).rstrip(".") for t in tokens]
    return [t for t in cleaned if _valid_skill(t)]


def dedupe_skills(skills: List[str]) -> List[str]:
    """Case-insensitive, first spelling wins, order kept."""
    seen = set()
    out = []
    for s in skills:
        key = s.lower()
        if key not in seen:
            seen.add(key)
            out.append(s)
    return out


def parse_skills_block(
    text: str,
    tables: HeuristicTables = DEFAULT_TABLES,
    fallback_threshold: int = 10,
    sink: Optional[DiagnosticSink] = None,
) -> List[str]:
    sink = resolve_sink(sink)
    skills: List[str] = []
    body_lines: List[str] = []

    for raw in text.split("\n"):
        line = raw.strip()
        if not line:
            continue
        family = header_family(line)
        if family == "skills":
            line = strip_header(line)
        elif family:
            break
        if not line:
            continue
        body_lines.append(line)
        skills.extend(skills_from_line(line))

    skills = dedupe_skills(skills)

    if len(skills) < fallback_threshold:
        hits = tables.fallback_skills.find_all("\n".join(body_lines))
        sink("skills.fallback", {"found": len(skills), "hits": len(hits)})
        skills = dedupe_skills(skills + hits)

    return skills
