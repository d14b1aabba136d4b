"""Clock text <-> seconds conversion."""

from tn.core.config import ClockMode, Precision
from tn.core.errors import MalformedTimeError


def parse_clock(text):
    """Parse ``H``, ``H:MM`` or ``H:MM:SS`` into a number of seconds.

    Missing segments count as zero.  Segments are not range checked, so
    ``1:90`` is simply 2:30.
    """
    parts = text.split(":")
    if len(parts) > 3:
        raise MalformedTimeError(text, "too many ':' segments")
    total = 0
    for part, scale in zip(parts, (3600, 60, 1)):
        if not part.isascii() or not part.isdigit():
            raise MalformedTimeError(text)
        total += int(part) * scale
    return total


def format_clock(seconds, precision):
    """Format seconds as ``H:MM:SS``, ``H:MM`` or ``H``.  Hours are never wrapped."""
    seconds = max(0, int(seconds))
    h, rem = divmod(seconds, 3600)
    m, s = divmod(rem, 60)
    if precision is Precision.SECONDS:
        return f"{h}:{m:02d}:{s:02d}"
    if precision is Precision.MINUTES:
        return f"{h}:{m:02d}"
    if precision is Precision.HOURS:
        return f"{h}"
    raise ValueError(f"Unknown precision: {precision!r}")


def _hour_field(hour, clock_mode):
    if clock_mode is ClockMode.TWENTY_FOUR:
        return hour
    if clock_mode is ClockMode.TWELVE:
        return hour % 12 or 12
    raise ValueError(f"Unknown clock mode: {clock_mode!r}")


def current_clock_text(now, clock_mode, precision):
    """Render the wall clock of ``now`` the way it gets written into annotations."""
    hour = _hour_field(now.hour, clock_mode)
    return format_clock(hour * 3600 + now.minute * 60 + now.second, precision)


def current_clock_value(now, settings):
    """Clock value of exactly the text a toggle would write at ``now``."""
    text = current_clock_text(now, settings.clock_mode, settings.precision)
    return parse_clock(text)
