[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "qlemu"
version = "0.1.0"
description = "Building blocks of a Sinclair QL emulator: memory, ROM patching, IPC keyboard, beeper sound, SuperBASIC extension tables and network database entries"
requires-python = ">=3.10"
dependencies = []
keywords = ["sinclair", "ql", "qdos", "emulator", "68000", "minerva", "superbasic"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Emulators",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["qlemu"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
