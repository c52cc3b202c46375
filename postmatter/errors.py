from typing import Optional


class FrontMatterError(Exception):
    """Base class for documents that cannot be turned into a Post."""

    def __init__(
        self, reason: str, source: Optional[str] = None, line: Optional[int] = None
    ):
        super().__init__(reason)
        self.reason = reason
        self.source = source
        self.line = line

    @property
    def kind(self) -> str:
        return type(self).__name__

    def describe(self) -> str:
        location = self.source or "<string>"
        if self.line is not None:
            location = f"{location}:{self.line}"
        return f"{location}: {self.reason}"

    def __str__(self) -> str:
        return self.describe()


class MissingFrontMatter(FrontMatterError):
    def __init__(self, source: Optional[str] = None):
        super().__init__(
            "document does not start with a '---' front matter delimiter",
            source=source,
            line=1,
        )


class UnterminatedFrontMatter(FrontMatterError):
    def __init__(self, source: Optional[str] = None):
        super().__init__(
            "front matter is opened with '---' but never closed",
            source=source,
            line=1,
        )


class MalformedField(FrontMatterError):
    def __init__(self, line: int, reason: str, source: Optional[str] = None):
        super().__init__(reason, source=source, line=line)


class MissingRequiredField(FrontMatterError):
    def __init__(self, field: str, source: Optional[str] = None):
        super().__init__(f"required field '{field}' is missing", source=source)
        self.field = field


class UnreadableFile(FrontMatterError):
    """The file exists but its bytes are not valid UTF-8 text."""
