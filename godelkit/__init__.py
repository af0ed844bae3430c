"""Launcher argument parsing, godel.yml configuration, default plugins and project path listing."""

__version__ = "0.1.0"

__all__ = ["__version__"]