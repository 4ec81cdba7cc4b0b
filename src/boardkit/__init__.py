"""BoardKit - Turns project templates into GitHub labels, issues and project boards."""

__version__ = "0.1.0"


def get_version() -> str:
    """Return the installed BoardKit version."""
    return __version__
