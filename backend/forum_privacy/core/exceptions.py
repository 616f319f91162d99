"""
Exceptions raised by forum privacy components.

Storage and collaborator errors are not wrapped; they propagate as raised.
"""


class ForumPrivacyError(Exception):
    """Base class for errors raised by this package."""


class ExportWriterError(ForumPrivacyError):
    """The export writer cannot place a document at the requested path."""

    def __init__(self, path: list[str], reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot export to {'/'.join(path) or '<root>'}: {reason}")
