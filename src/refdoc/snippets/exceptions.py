"""Exception hierarchy for reference snippet generation."""

from __future__ import annotations


class SnippetError(Exception):
    """Base exception for snippet generation errors."""
    pass


class ReferenceParseError(SnippetError):
    """The reference document is not well-formed YAML.

    The underlying ruamel error is chained as ``__cause__`` and kept on
    ``error`` so callers can report the exact location.
    """

    def __init__(self, error: Exception, source: str | None = None):
        self.error = error
        self.source = source
        location = f" ({source})" if source else ""
        super().__init__(f"Can't parse reference document{location}: {error}")


class NodeShapeError(SnippetError):
    """A node does not have the structure an operation requires."""
    pass


class RenderError(SnippetError):
    """The serializer failed on a synthesized node.

    This points at a bug in the generator rather than bad input, so the
    container and section being rendered are kept for diagnosis.
    """

    def __init__(
        self,
        message: str,
        container: str | None = None,
        section: str | None = None,
    ):
        self.container = container
        self.section = section

        path = ".".join(part for part in (container, section) if part)
        if path:
            message = f"{message} (while rendering {path})"
        super().__init__(message)


class MetadataError(SnippetError):
    """A metadata file could not be read or has an unexpected layout."""
    pass


class SettingsError(SnippetError):
    """The extractor settings file is invalid."""
    pass
