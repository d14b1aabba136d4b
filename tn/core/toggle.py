"""Clocking on and off by editing annotations in place.

An annotation whose logical line ends with the separator (``time: 8:20-``)
is open; toggling closes it with the current time.  Anything else is
closed, and toggling appends a new open range.  With no marker before the
cursor a fresh annotation is started at the cursor.
"""

from tn.common.logger import log
from tn.core.clock import current_clock_text, current_clock_value, format_clock
from tn.core.errors import MarkerNotFound, with_problems
from tn.core.locator import (
    Annotation,
    extract_logical_line,
    extract_prefix,
    locate_annotation,
    logical_line_end,
    require_preceding_marker,
)
from tn.core.ranges import accumulate


def split_if_needed(surface, position, prefix, settings):
    """Break the line of ``position`` at the last whitespace within the wrap column.

    Inserts the continuation marker, a newline, ``prefix`` and a space after
    that whitespace, which moves the following tokens onto a continuation
    line.  Returns the number of characters inserted, 0 when there is no
    whitespace after some content to break at.
    """
    begin, end = surface.line_region(position)
    boundary = surface.column_position(position, settings.wrap_column)
    # The character sitting on the boundary column may itself be the break point.
    text = surface.substr(begin, min(boundary + 1, end))
    for i in range(len(text) - 1, 0, -1):
        if text[i].isspace() and text[:i].strip():
            piece = f"{settings.continuation}\n{prefix} "
            inserted = surface.insert(begin + i + 1, piece)
            log.debug(f"Wrapped line at {begin + i + 1} (column {settings.wrap_column})")
            return inserted
    log.debug(f"No whitespace to wrap at before column {settings.wrap_column}")
    return 0


def _wrap(surface, point, prefix, settings):
    """Run the splitter when the line of ``point`` reaches the wrap column, returning the moved ``point``."""
    if not settings.wraps:
        return point
    _, line_end = surface.line_region(point)
    if surface.column(line_end) < settings.wrap_column:
        return point
    inserted = split_if_needed(surface, point, prefix, settings)
    return point + inserted


def toggle(surface, settings):
    """Clock off an open range, or clock on a new one.  Returns the notification text."""
    problems = []
    now = surface.now()
    now_text = current_clock_text(now, settings.clock_mode, settings.precision)
    now_value = current_clock_value(now, settings)

    with surface.edit():
        cursor = surface.cursor()
        annotation = locate_annotation(surface, cursor, settings)
        if annotation is None:
            log.info(f"No '{settings.marker}' marker before {cursor}, starting a new annotation")
            surface.insert(cursor, settings.marker)
            annotation = Annotation(
                marker_position=cursor,
                prefix=extract_prefix(surface, cursor, settings),
                start=cursor + len(settings.marker),
            )
        prefix = annotation.prefix

        end = logical_line_end(surface, annotation.start, prefix, settings)
        _, line_end = surface.line_region(end)
        surface.erase(end, line_end)

        line = extract_logical_line(surface, annotation.start, prefix, settings)
        tokens = line.split()
        if line.endswith(settings.separator):
            span = accumulate([tokens[-1] + now_text], settings, now_value, problems=problems)
            message = f"clocked off: {format_clock(span.seconds, settings.precision)}"
            text = now_text
        else:
            line_begin, _ = surface.line_region(end)
            if not surface.substr(line_begin, end).strip():
                end += surface.insert(end, prefix)
            if tokens:
                last_end = tokens[-1].rpartition(settings.separator)[2]
                gap = accumulate([f"{last_end}{settings.separator}{now_text}"], settings, now_value, problems=problems)
                message = f"clocked on: {format_clock(gap.seconds, settings.precision)} since last"
            else:
                message = "clocked on: started"
            text = f" {now_text}{settings.separator}"

        point = end + surface.insert(end, text)
        point = _wrap(surface, point, prefix, settings)

        if surface.line_region(surface.cursor())[0] == surface.line_region(point)[0]:
            surface.set_cursor(point)

    message = with_problems(message, problems)
    log.info(f"Toggle at {annotation.marker_position}: {message}")
    surface.notify(message)
    return message


def insert(surface, settings):
    """Insert the current time at the cursor, replacing any selection.  Returns the inserted text."""
    problems = []
    now_text = current_clock_text(surface.now(), settings.clock_mode, settings.precision)

    with surface.edit():
        selection = surface.selection()
        if selection is not None:
            surface.erase(*selection)
            position = selection[0]
        else:
            position = surface.cursor()
        point = position + surface.insert(position, now_text)
        surface.set_cursor(point)

        _, line_end = surface.line_region(point)
        if settings.wraps and surface.column(line_end) >= settings.wrap_column:
            try:
                marker_position = require_preceding_marker(surface, point, settings)
            except MarkerNotFound as e:
                log.warning(f"Not wrapping inserted time: {e}")
                problems.append(e)
            else:
                prefix = extract_prefix(surface, marker_position, settings)
                _wrap(surface, point, prefix, settings)

    log.info(f"Inserted {now_text!r} at {position}")
    if problems:
        surface.notify(with_problems(f"inserted {now_text}", problems))
    return now_text
