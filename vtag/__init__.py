"""vtag: tag a release from the version in a package manifest."""

__version__ = "0.3.0"
