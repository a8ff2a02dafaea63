"""Build static photo gallery sites from folders of photos, with export, preview and an image cache."""

__version__ = "0.1.0"