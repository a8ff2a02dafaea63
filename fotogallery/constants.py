"""Shared constants for the gallery generator."""

import os

PHOTO_SWIPE_VERSION = "5.4.4"
PHOTO_SWIPE_CAPTION_PLUGIN_VERSION = "1.2.7"
CACHE_DIRECTORY_NAME = ".foto"
CACHE_VERSION = "3"

PHOTOS_URL_PATH = "/photos/"
DEFAULT_COMPRESS_QUALITY = 75

CONFIG_FILE_PATH = os.path.join(".", "foto.toml")
TEMPLATE_FILE_PATH = os.path.join("templates", "template.html")