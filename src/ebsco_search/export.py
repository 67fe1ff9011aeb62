"""Export utilities for SearchResultSet."""

from __future__ import annotations

import re
import string

from ebsco_search.models import Author, ItemFormat, ResultItem, SearchResultSet

_BIBTEX_ENTRY_TYPES = {
    ItemFormat.BOOK: "book",
    ItemFormat.ARTICLE: "article",
    ItemFormat.DISSERTATION: "phdthesis",
}


def export_json(results: SearchResultSet, indent: int = 2) -> str:
    """Serialize result set to JSON string."""
    return results.model_dump_json(indent=indent)


def export_bibtex(results: SearchResultSet) -> str:
    """Generate BibTeX entries for all items."""
    if not results.items:
        return ""
    seen_keys: set[str] = set()
    entries = []
    for item in results.items:
        key = _make_bibtex_key(item, seen_keys)
        entries.append(_format_bibtex_entry(item, key))
    return "\n\n".join(entries)


def export_markdown(results: SearchResultSet) -> str:
    """Generate Markdown table of items."""
    header = "| # | Title | Authors | Year | Venue | Format |"
    sep = "|---|-------|---------|------|-------|--------|"
    rows = []
    for i, item in enumerate(results.items, 1):
        authors = _format_authors_short(item.authors)
        title = item.title or "-"
        year = item.year or "-"
        venue = item.journal_title or item.publisher or "-"
        fmt = item.format_str or item.format.value
        rows.append(f"| {i} | {title} | {authors} | {year} | {venue} | {fmt} |")
    return "\n".join([header, sep] + rows)


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------

_BIBTEX_SPECIAL = str.maketrans({
    "&": r"\&",
    "%": r"\%",
    "_": r"\_",
    "#": r"\#",
})


def _escape_bibtex(text: str) -> str:
    """Escape BibTeX special characters."""
    return text.translate(_BIBTEX_SPECIAL)


def _last_name(display: str) -> str:
    # EBSCO display names are usually "Last, First".
    if "," in display:
        return display.split(",", 1)[0].strip()
    parts = display.split()
    return parts[-1] if parts else ""


def _make_bibtex_key(item: ResultItem, seen: set[str]) -> str:
    """Generate a unique BibTeX key for an item."""
    name = _last_name(item.authors[0].display).lower() if item.authors else ""
    name = name or "unknown"

    year = item.year or "nd"

    words = re.findall(r"[a-zA-Z]+", item.title or "")
    first_word = words[0].lower() if words else "untitled"

    base = re.sub(r"[^a-z0-9_]", "", f"{name}_{year}_{first_word}")

    # Collision avoidance
    key = base
    suffix_idx = 0
    while key in seen:
        key = f"{base}_{string.ascii_lowercase[suffix_idx]}"
        suffix_idx += 1
    seen.add(key)
    return key


def _format_bibtex_entry(item: ResultItem, key: str) -> str:
    """Format a single item, entry type chosen from its sniffed format."""
    entry_type = _BIBTEX_ENTRY_TYPES.get(item.format, "misc")
    lines = [f"@{entry_type}{{{key},"]

    if item.authors:
        author_str = " and ".join(a.display for a in item.authors)
        lines.append(f"  author = {{{_escape_bibtex(author_str)}}},")
    else:
        lines.append("  author = {Unknown},")

    # Title (wrapped in braces to preserve capitalization)
    lines.append(f"  title = {{{{{_escape_bibtex(item.title or 'Untitled')}}}}},")

    if item.year:
        lines.append(f"  year = {{{item.year}}},")
    if item.journal_title:
        lines.append(f"  journal = {{{_escape_bibtex(item.journal_title)}}},")
    if item.volume:
        lines.append(f"  volume = {{{item.volume}}},")
    if item.issue:
        lines.append(f"  number = {{{item.issue}}},")
    if item.start_page:
        lines.append(f"  pages = {{{item.start_page}}},")
    if item.publisher:
        lines.append(f"  publisher = {{{_escape_bibtex(item.publisher)}}},")
    if item.issn:
        lines.append(f"  issn = {{{item.issn}}},")
    if item.isbn:
        lines.append(f"  isbn = {{{item.isbn}}},")
    if item.doi:
        lines.append(f"  doi = {{{item.doi}}},")
    if item.link:
        lines.append(f"  url = {{{item.link}}},")

    lines.append("}")
    return "\n".join(lines)


def _format_authors_short(authors: list[Author]) -> str:
    """Format author list for Markdown display."""
    if not authors:
        return "-"
    names = [a.display for a in authors]
    if len(names) <= 3:
        return "; ".join(names)
    return f"{names[0]} et al."
