[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kbdtools"
version = "0.1.0"
description = "Linux console keyboard and font utilities: showkey, totextmode, spawn_command, VT locking helpers and PSF header handling"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "console",
    "keyboard",
    "keycodes",
    "scancodes",
    "psf",
    "font",
    "vt",
    "linux",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Console Fonts",
    "Topic :: Terminals",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
showkey = "kbdtools.showkey:main"
totextmode = "kbdtools.totextmode:main"
spawn_command = "kbdtools.spawn_command:main"

[tool.hatch.build.targets.wheel]
packages = ["kbdtools"]

[tool.hatch.build.targets.sdist]
include = ["kbdtools", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
