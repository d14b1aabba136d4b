"""Summing ``start-end`` range tokens into an elapsed duration."""

from typing import NamedTuple

from tn.common.logger import log
from tn.core.clock import parse_clock
from tn.core.errors import IncompleteNotAllowed, MalformedTimeError


class Accumulation(NamedTuple):
    seconds: int
    incomplete: bool


def _record(problems, problem):
    log.warning(str(problem))
    if problems is not None:
        problems.append(problem)


def _wrapped(span, settings):
    # Negative means the range crossed the end of the clock period once.
    if span < 0:
        span %= settings.clock_mode.wrap_seconds
    return span


def range_span(start, end, settings):
    """Seconds from ``start`` to ``end`` (clock text), wrapping once past the clock period."""
    return _wrapped(parse_clock(end) - parse_clock(start), settings)


def accumulate(tokens, settings, now_value, allow_incomplete=False, problems=None):
    """Total the elapsed seconds of ``tokens``.

    A token with no end (``8:20`` or ``8:20-``) is open and gets
    ``now_value`` as its end.  That is only expected for the last token, and
    only when ``allow_incomplete`` is set; anything else is recorded as an
    :class:`IncompleteNotAllowed` warning and summed anyway.  Unparseable
    tokens are recorded as :class:`MalformedTimeError` and add nothing.
    """
    tokens = list(tokens)
    total = 0
    incomplete = False
    for i, token in enumerate(tokens):
        start, found, end = token.partition(settings.separator)
        incomplete = not found or not end
        if incomplete:
            if i < len(tokens) - 1:
                _record(problems, IncompleteNotAllowed(token, "is followed by more ranges"))
            elif not allow_incomplete:
                _record(problems, IncompleteNotAllowed(token, "is not allowed here"))
        try:
            if incomplete:
                span = _wrapped(now_value - parse_clock(start), settings)
            else:
                span = range_span(start, end, settings)
        except MalformedTimeError as e:
            _record(problems, e)
            span = 0
        total += span
    log.debug(f"Accumulated {len(tokens)} range(s) to {total}s (incomplete={incomplete})")
    return Accumulation(total, incomplete)
