"""assetlink - project asset resolution for scene documents."""

__version__ = "0.1.0"
