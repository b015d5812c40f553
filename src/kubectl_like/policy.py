"""What to do when one log source fails"""

from .exceptions import DestinationError
from .writers import Writer


class FailurePolicy:
    """
    Either abort on the first source error, or replace the failed source's
    remaining output with an ``error: <message>`` line and carry on.

    Output errors are never ignored: if the destination is broken there is
    nowhere to put the marker.
    """

    def __init__(self, ignore_errors: bool = False):
        self.ignore_errors = ignore_errors

    def handle(self, error: Exception, out: Writer):
        if isinstance(error, DestinationError) or not self.ignore_errors:
            raise error

        marker = f"error: {error}\n".encode('utf-8')
        try:
            out.write(marker)
        except DestinationError:
            raise
        except (OSError, ValueError) as e:
            raise DestinationError(f"write failed: {e}") from e
