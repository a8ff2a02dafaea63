[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fotogallery"
version = "0.1.0"
description = "A publishing tool for photographers that builds static photo gallery sites"
requires-python = ">=3.11"
keywords = ["photography", "gallery", "static-site", "photos", "thumbnails"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: Site Management",
    "Topic :: Multimedia :: Graphics",
]
dependencies = [
    "pillow",
    "jinja2",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
fotogallery = "fotogallery.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["fotogallery"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
