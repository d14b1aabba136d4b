"""Error taxonomy for time annotations.

None of these are fatal to the host.  The accumulator records them as
warnings and keeps going; the commands turn them into notifications.
"""


class TimeNotesError(Exception):
    """Base class for everything raised or recorded by the core."""


class MalformedTimeError(TimeNotesError, ValueError):
    """A clock segment is not a non-negative integer."""

    def __init__(self, text, reason="not a clock value"):
        self.text = text
        super().__init__(f"malformed time {text!r}: {reason}")


class IncompleteNotAllowed(TimeNotesError):
    """An open range showed up where the caller does not accept one."""

    def __init__(self, token, reason):
        self.token = token
        super().__init__(f"open range {token!r} {reason}")


class MarkerNotFound(TimeNotesError):
    """No annotation marker precedes the given position."""

    def __init__(self, marker, position):
        self.marker = marker
        self.position = position
        super().__init__(f"no {marker!r} marker found before position {position}")


def with_problems(message, problems):
    """Append recorded warnings to a notification message."""
    if not problems:
        return message
    return f"{message} ({'; '.join(str(p) for p in problems)})"
