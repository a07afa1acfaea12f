"""
storyhost configuration — all environment variables in one place.

Read from environment at import time; CLI flags override individual values.
"""

from __future__ import annotations

import os


class Settings:
    """Application settings from environment variables."""

    # Storybook working directory (created by the install stage)
    STORYBOOK_PATH: str = os.environ.get("STORYBOOK_PATH", "./storybook-server")

    # HTTP listener
    HOST: str = os.environ.get("STORYBOOK_HOST", "0.0.0.0")
    PORT: int = int(os.environ.get("STORYBOOK_PORT", "60606"))

    # Prefix of every HTTP route, e.g. /prod
    ROUTE_PREFIX: str = os.environ.get("STORYBOOK_ROUTE_PREFIX", "")

    # External commands, split with shlex; the first word must be on PATH
    INIT_COMMAND: str = os.environ.get("STORYBOOK_INIT_COMMAND", "npx sb init -t server")
    BUILD_COMMAND: str = os.environ.get("STORYBOOK_BUILD_COMMAND", "npm run build-storybook")

    # Logging
    LOG_LEVEL: str = os.environ.get("STORYBOOK_LOG_LEVEL", "INFO")

    @property
    def STATIC_DIR(self) -> str:
        return os.path.join(self.STORYBOOK_PATH, "storybook-static")


# Singleton instance
settings = Settings()
