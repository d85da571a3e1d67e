"""
Persisted session log.

The scene writes an append-only, timestamped text log next to its data
when the debug flag is on.  The log is a loguru file sink that is added
when the session opens and removed when it closes, so every message
logged through ``loguru.logger`` while the scene is live lands in it.
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger

LOG_FORMAT = "[{time:YYYY-MM-DD HH:mm:ss.SSS}] {message}"


class SessionLog:
    """
    Scoped file sink for the scene's debug log.

    Example::

        with SessionLog("city_simulator_debug.log"):
            logger.info("=== CitySimulator Awake ===")
    """

    def __init__(self, path: str | Path, level: str = "DEBUG", enabled: bool = True):
        self.path = Path(path)
        self.level = level
        self.enabled = enabled
        self._sink_id: int | None = None

    @property
    def is_open(self) -> bool:
        return self._sink_id is not None

    def open(self) -> "SessionLog":
        if not self.enabled or self.is_open:
            return self
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._sink_id = logger.add(
            self.path,
            format=LOG_FORMAT,
            level=self.level,
            mode="a",
            encoding="utf-8",
        )
        logger.debug(f"Session log opened at {self.path}")
        return self

    def close(self) -> None:
        if self._sink_id is None:
            return
        logger.debug("Session log closing")
        logger.remove(self._sink_id)
        self._sink_id = None

    def __enter__(self) -> "SessionLog":
        return self.open()

    def __exit__(self, *exc) -> None:
        self.close()
