"""Markdown report generation."""

from pathlib import Path

from .models import EventSets

INDENT = "    "
REPORT_HEADING = "GitHub"


def format_markdown(sets: EventSets) -> str:
    """Render event sets as a nested Markdown bullet list.

    Sections appear in a fixed order and are left out when empty. Titles
    within a section are sorted so the same events always give the same
    report.

    Args:
        sets: Reconciled event sets

    Returns:
        Markdown outline headed by a single top-level bullet
    """
    lines = [f"* {REPORT_HEADING}"]
    for heading, titles in sets.sections():
        lines.extend(_build_section(heading, titles))
    return "\n".join(lines)


def _build_section(heading: str, titles: set[str]) -> list[str]:
    """Build the lines for one section.

    Args:
        heading: Section name shown in the outline
        titles: Issue and pull request titles in the section

    Returns:
        List of Markdown lines, empty if there are no titles
    """
    if not titles:
        return []

    lines = [f"{INDENT}* {heading}"]
    for title in sorted(titles):
        lines.append(f"{INDENT}{INDENT}* {title}")
    return lines


def write_report(markdown: str, output_path: str | Path) -> None:
    """Write a rendered report to a file.

    Args:
        markdown: Rendered report
        output_path: Path where the report should be written
    """
    output_path = Path(output_path)

    with open(output_path, "w") as f:
        f.write(markdown)
        f.write("\n")
