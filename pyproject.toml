[build-system]
requires = ["setuptools>=61.0"]
build-backend = "setuptools.build_meta"

[project]
name = "retrotiles"
version = "0.1.0"
description = "Building blocks for retro 2D graphics: asset loaders, indexed bitmaps, palettes, scanline blitters, animations and actors"
requires-python = ">=3.10"
keywords = ["tilemap", "tmx", "palette", "color-cycle", "sprites", "retro", "2d", "graphics"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Graphics",
    "Topic :: Games/Entertainment",
]
dependencies = [
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.setuptools.packages.find]
include = ["retrotiles*"]

[tool.pytest.ini_options]
addopts = "-ra"
