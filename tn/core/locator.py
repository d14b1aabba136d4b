"""Finding annotations in the text and reading their tokens back out.

An annotation starts at a marker and runs to the end of its line.  A line
ending in the continuation marker pulls in the next physical line as well,
which usually starts with the annotation's prefix (whitespace lining the
tokens up under the first one)::

    time: 8:20-9:20 10:05-11:40 \\
          13:00-
"""

from dataclasses import dataclass

from tn.common.logger import log
from tn.core.errors import MarkerNotFound


@dataclass(frozen=True)
class Annotation:
    marker_position: int
    prefix: str
    start: int  # first position after the marker


def find_preceding_marker(surface, position, settings, from_line_end=True, bound=0):
    """Position of the nearest marker before ``position``, or None.

    With ``from_line_end`` the search starts at the end of the line holding
    ``position``, so a marker later on the cursor line still counts.
    Without it the search starts exactly at ``position``; walking backward
    from one marker's own position therefore never finds that marker again.
    Markers starting before ``bound`` are ignored.
    """
    start = surface.line_region(position)[1] if from_line_end else position
    return surface.find_backward(settings.marker, start, bound)


def require_preceding_marker(surface, position, settings, from_line_end=True, bound=0):
    found = find_preceding_marker(surface, position, settings, from_line_end, bound)
    if found is None:
        raise MarkerNotFound(settings.marker, position)
    return found


def extract_prefix(surface, marker_position, settings):
    """Leading text that lines continuation tokens up with the first token.

    Everything on the line before the marker is kept as it is, so a comment
    leader like ``# `` carries over to continuation lines.  The marker itself
    becomes the same number of spaces.
    """
    begin, _ = surface.line_region(marker_position)
    return surface.substr(begin, marker_position) + " " * len(settings.marker)


def locate_annotation(surface, position, settings, from_line_end=True, bound=0):
    marker_position = find_preceding_marker(surface, position, settings, from_line_end, bound)
    if marker_position is None:
        return None
    return Annotation(
        marker_position=marker_position,
        prefix=extract_prefix(surface, marker_position, settings),
        start=marker_position + len(settings.marker),
    )


def _physical_lines(surface, position, prefix, settings):
    """Yield ``(content, trimmed_end)`` for each physical line of one logical line.

    Loops instead of recursing; each step moves past a newline so the walk
    ends at the end of the text at the latest.
    """
    cont = settings.continuation
    size = surface.size()
    while True:
        _, line_end = surface.line_region(position)
        text = surface.substr(position, line_end).rstrip()
        trimmed_end = position + len(text)
        if prefix and text.startswith(prefix):
            text = text[len(prefix):]
        continued = text.endswith(cont)
        if continued:
            text = text[:-len(cont)]
        yield text.strip(), trimmed_end
        if not continued or line_end >= size:
            return
        position = line_end + 1


def extract_logical_line(surface, position, prefix, settings):
    """All tokens of the logical line starting at ``position``, single-space joined."""
    parts = [text for text, _ in _physical_lines(surface, position, prefix, settings) if text]
    line = " ".join(" ".join(part.split()) for part in parts)
    log.debug(f"Extracted logical line at {position}: {line!r}")
    return line


def logical_line_end(surface, position, prefix, settings):
    """Trailing-whitespace-trimmed end of the last physical line of the logical line."""
    end = position
    for _, end in _physical_lines(surface, position, prefix, settings):
        pass
    return end
