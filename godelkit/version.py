"""Application name and version reporting."""

APP_NAME = "godel"

VERSION = "unspecified"


def version_output() -> str:
    """Return the line printed for the version flag."""
    return f"{APP_NAME} version {VERSION}"