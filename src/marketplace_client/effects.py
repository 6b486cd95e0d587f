"""
User facing side effects of failed requests: notifications and navigation.
"""
import logging
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)
LOG_PREFIX = "[Effects]"


class Notifier(ABC):
    """Shows an error message to the user."""

    @abstractmethod
    def error(self, message: str) -> None:
        ...


class Navigator(ABC):
    """Moves the user to another location in the application."""

    @abstractmethod
    def navigate(self, path: str) -> None:
        ...


class LoggingNotifier(Notifier):
    """Default notifier; the message goes to the log."""

    def error(self, message: str) -> None:
        logger.warning(f"{LOG_PREFIX} {message}")


class LoggingNavigator(Navigator):
    """Default navigator; records the visited paths."""

    def __init__(self) -> None:
        self.history: List[str] = []

    @property
    def location(self) -> Optional[str]:
        return self.history[-1] if self.history else None

    def navigate(self, path: str) -> None:
        logger.info(f"{LOG_PREFIX} Navigating to {path}")
        self.history.append(path)


class CallbackNotifier(Notifier):
    def __init__(self, callback: Callable[[str], None]):
        self._callback = callback

    def error(self, message: str) -> None:
        self._callback(message)


class CallbackNavigator(Navigator):
    def __init__(self, callback: Callable[[str], None]):
        self._callback = callback

    def navigate(self, path: str) -> None:
        self._callback(path)
