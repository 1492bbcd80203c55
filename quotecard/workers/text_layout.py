"""Greedy word wrapping for card text."""

from typing import Callable, List

MeasureFn = Callable[[str], float]


def wrap_text(text: str, measure: MeasureFn, max_width: float) -> List[str]:
    """Wrap text into lines no wider than max_width.

    Explicit newlines start a new paragraph. Words are split on single
    spaces and accumulated greedily; a word wider than max_width on its own
    is emitted unsplit. Empty paragraphs produce no line, so blank lines
    collapse.

    Args:
        text: Text to wrap
        measure: Returns the rendered pixel width of a string
        max_width: Maximum line width in pixels

    Returns:
        Lines in render order, top to bottom
    """
    lines: List[str] = []

    for paragraph in text.split("\n"):
        current = ""
        for word in paragraph.split(" "):
            candidate = f"{current} {word}" if current else word
            if measure(candidate) > max_width and current:
                lines.append(current)
                current = word
            else:
                current = candidate

        if current:
            lines.append(current)

    return lines


def block_height(line_count: int, font_size: float, line_height: float) -> float:
    """Vertical extent of a wrapped block: first line plus later advances."""
    if line_count == 0:
        return 0.0
    return font_size + (line_count - 1) * font_size * line_height
