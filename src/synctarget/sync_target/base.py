from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping

from synctarget.config.settings import SettingsReader
from synctarget.storage.file_api import FileApi


class BaseSyncTarget(ABC):
    """Binds the synchronizer to one kind of remote storage.

    Holds the local database handle and settings reader, and caches the
    FileApi and synchronizer built by the subclass.
    """

    def __init__(self, db: Any, settings: SettingsReader, options: Mapping[str, Any] | None = None):
        self._db = db
        self._settings = settings
        self._options = dict(options or {})
        self._file_api: FileApi | None = None
        self._synchronizer: Any = None

    @classmethod
    @abstractmethod
    def id(cls) -> int: ...

    @classmethod
    @abstractmethod
    def target_name(cls) -> str: ...

    @classmethod
    @abstractmethod
    def label(cls) -> str: ...

    @classmethod
    def supports_config_check(cls) -> bool:
        return False

    @classmethod
    def check_config(cls, options):
        raise NotImplementedError(f"{cls.__name__} does not support config checks")

    def db(self) -> Any:
        return self._db

    def settings(self) -> SettingsReader:
        return self._settings

    def option(self, name: str, default: Any = None) -> Any:
        return self._options.get(name, default)

    @abstractmethod
    def is_authenticated(self) -> bool: ...

    @abstractmethod
    def init_file_api(self) -> FileApi: ...

    @abstractmethod
    def init_synchronizer(self) -> Any: ...

    def file_api(self) -> FileApi:
        if self._file_api is None:
            self._file_api = self.init_file_api()
        return self._file_api

    def synchronizer(self) -> Any:
        if self._synchronizer is None:
            self._synchronizer = self.init_synchronizer()
        return self._synchronizer
