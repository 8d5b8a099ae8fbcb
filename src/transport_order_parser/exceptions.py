"""
Exceptions raised by the Transport Order Parser.
"""


class UnsupportedDocumentError(ValueError):
    """The line sequence does not match the supported booking layout."""

    def __init__(self, message: str = "Unsupported document layout", line_count: int = 0):
        super().__init__(message)
        self.line_count = line_count
