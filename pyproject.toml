[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "spotcli"
version = "0.1.0"
description = "Command-line remote for a running Spotify player instance, with a song lyric finder"
requires-python = ">=3.10"
dependencies = [
    "requests",
]
keywords = ["spotify", "music", "player", "lyrics", "cli", "playlist"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Players",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[project.scripts]
spotcli = "spotcli.handlers:main"
spotcli-lyrics = "spotcli.lyrics:main"

[tool.hatch.build.targets.wheel]
packages = ["spotcli"]

[tool.hatch.build.targets.sdist]
include = ["spotcli", "tests", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
