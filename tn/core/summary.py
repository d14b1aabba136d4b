"""Adding up annotations into a human readable total."""

from enum import Enum

from tn.common.logger import log
from tn.core.clock import current_clock_value, format_clock
from tn.core.errors import with_problems
from tn.core.locator import extract_logical_line, locate_annotation
from tn.core.ranges import accumulate


class SummaryMode(Enum):
    SINGLE = "single"         # nearest annotation before the cursor
    ALL = "all"               # every annotation from the cursor back to the start
    SELECTION = "selection"   # every annotation inside a region


def _walk(surface, settings, position, bound, from_line_end):
    """Yield annotations from ``position`` backward to ``bound``, nearest first."""
    annotation = locate_annotation(surface, position, settings, from_line_end, bound)
    while annotation is not None:
        yield annotation
        # Searching from the marker itself (not its line end) so it is never matched twice.
        annotation = locate_annotation(surface, annotation.marker_position, settings, False, bound)


def summarize(surface, settings, mode=SummaryMode.SINGLE, region=None, problems=None):
    """Summed duration text of the chosen annotations, ``..`` appended while a range is open.

    Returns None when no annotation was found.  Only the first annotation
    scanned may end in an open range without a warning.

    An open range is closed with the time a toggle would write right now,
    which is cut down to the configured precision.  With ``Precision.HOURS``
    a running total therefore lags the wall clock by up to 59 minutes.
    """
    now_value = current_clock_value(surface.now(), settings)

    if mode is SummaryMode.SINGLE:
        nearest = locate_annotation(surface, surface.cursor(), settings)
        annotations = [nearest] if nearest is not None else []
    elif mode is SummaryMode.ALL:
        annotations = _walk(surface, settings, surface.cursor(), 0, True)
    elif mode is SummaryMode.SELECTION:
        if region is None:
            raise ValueError("a selection summary needs a region")
        begin, end = region
        annotations = _walk(surface, settings, end, begin, False)
    else:
        raise ValueError(f"Unknown summary mode: {mode!r}")

    total = 0
    incomplete = False
    found = 0
    for annotation in annotations:
        line = extract_logical_line(surface, annotation.start, annotation.prefix, settings)
        result = accumulate(line.split(), settings, now_value, allow_incomplete=found == 0, problems=problems)
        total += result.seconds
        incomplete = incomplete or result.incomplete
        found += 1

    if not found:
        log.debug(f"No annotations found for {mode.value} summary")
        return None
    text = format_clock(total, settings.precision)
    if incomplete:
        text += ".."
    log.debug(f"{mode.value} summary over {found} annotation(s): {text}")
    return text


def show_summary(surface, settings, mode=SummaryMode.SINGLE):
    """Summarize the selection if there is one, otherwise use ``mode``, and notify the result."""
    problems = []
    region = surface.selection()
    if region is not None:
        mode = SummaryMode.SELECTION
    text = summarize(surface, settings, mode, region, problems=problems)

    message = text if text is not None else "no time annotations found"
    surface.notify(with_problems(message, problems))
    return text
