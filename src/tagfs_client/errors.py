"""Errors raised at the tagfs client boundary."""


class ExternalToolError(Exception):
    """The tagfs executable exited abnormally or could not be launched."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


def validate_tag_name(tag: str) -> str:
    """Reject names the backend cannot store as a single tag."""
    if not tag or any(ch.isspace() for ch in tag):
        raise ValueError(f"Invalid tag name: {tag!r}")
    return tag
