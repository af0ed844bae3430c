[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "godelkit"
version = "0.1.0"
description = "Launcher, task and configuration model for a plugin-driven project build tool: argument parsing, godel.yml loading, plugin and default-task resolution."
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = ["build", "tooling", "plugins", "configuration", "launcher", "yaml"]
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
    "Topic :: Software Development :: Build Tools",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["godelkit"]

[tool.hatch.build.targets.sdist]
include = ["godelkit", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"
