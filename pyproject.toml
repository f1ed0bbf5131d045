[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "stpixel"
version = "0.1.0"
description = "Pixel format conversion, palette matching, dithering and bitplane packing for Atari-style bitmaps, plus sample-rate and playback-buffer helpers"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "atari",
    "planar",
    "bitplane",
    "dithering",
    "palette",
    "rgb565",
    "pixel-conversion",
    "sample-rate",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: Graphics Conversion",
    "Topic :: Multimedia :: Sound/Audio",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["stpixel"]

[tool.pytest.ini_options]
addopts = "-ra"
