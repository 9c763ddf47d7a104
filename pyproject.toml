[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "scgdb"
version = "0.1.0"
description = "Database toolkit helpers: migration running, seeders, connection-pool settings, validation and repository query helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["database", "migrations", "seeders", "connection-pool", "repository", "validation"]
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
    "Topic :: Database",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["scgdb"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
