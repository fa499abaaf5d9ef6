"""Comment Relay - posts source activity records as comments on tracker issues."""

__version__ = "0.1.0"


def get_version() -> str:
    """Return the package version."""
    return __version__
