[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "unisql"
version = "0.1.0"
description = "Building blocks for a command-line SQL client: statement classification, settings, shell helpers and per-database dialect helpers"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "sql",
    "database",
    "cli",
    "sqlite",
    "postgresql",
    "sqlserver",
    "oracle",
    "trino",
    "vertica",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Front-Ends",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["unisql"]

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
