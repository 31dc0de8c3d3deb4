"""
Base service class and the singleton decorator used by application services.
"""
import threading
from typing import Optional, Type, TypeVar

from codechecker.core.config import Settings, get_settings
from codechecker.core.logging import get_logger

T = TypeVar('T')


def singleton(cls: Type[T]) -> Type[T]:
    """
    Make every instantiation of ``cls`` return one shared instance.

    ``reset_instance()`` drops the shared instance; the next call builds a
    fresh one, e.g. with different settings.
    """
    lock = threading.Lock()
    holder: dict = {}

    class SingletonWrapper(cls):  # type: ignore
        def __new__(klass, *args, **kwargs):
            with lock:
                if "instance" not in holder:
                    holder["instance"] = object.__new__(klass)
                return holder["instance"]

        def __init__(self, *args, **kwargs):
            if not getattr(self, '_singleton_initialized', False):
                super().__init__(*args, **kwargs)
                self._singleton_initialized = True

        @classmethod
        def reset_instance(klass) -> None:
            with lock:
                holder.clear()

    SingletonWrapper.__name__ = cls.__name__
    SingletonWrapper.__qualname__ = cls.__qualname__
    SingletonWrapper.__module__ = cls.__module__
    SingletonWrapper.__doc__ = cls.__doc__

    return SingletonWrapper  # type: ignore


class BaseService:
    """
    Base service class

    - logger named after the service module, bound with the service name
    - settings, injectable for tests, process settings otherwise
    - lazy setup through ``_initialize()``, run on first use
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.logger = get_logger(self.__class__.__module__, service=self.__class__.__name__)
        self._initialized = False

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            self._initialize()
            self._initialized = True
            self.logger.debug("service_initialized")

    def _initialize(self) -> None:
        """Subclasses override this for their own setup."""

    def __repr__(self):
        return f"<{self.__class__.__name__} initialized={self._initialized}>"
