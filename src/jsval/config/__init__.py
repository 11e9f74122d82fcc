"""Project configuration."""

from jsval.config.project import ProjectConfig

__all__ = ["ProjectConfig"]
