from pathlib import Path

from scanbook.config import ScanbookConfig
from scanbook.storage.fallback_store import FallbackBookStore
from scanbook.storage.handlers.storage_handler import StorageHandler, StorageHandlerFactory
from scanbook.storage.library import DocumentLibrary
from scanbook.storage.local_store import LocalBookStore
from scanbook.storage.remote_store import RemoteBookStore


class StorageConfig:
    """
    Builds the persistence objects described by a ScanbookConfig.
    """

    @staticmethod
    def create_local_handler(config: ScanbookConfig) -> StorageHandler:
        root_dir = Path(config.library_dir).expanduser()
        root_dir.mkdir(parents=True, exist_ok=True)
        return StorageHandlerFactory.get_handler("LOCAL", {"root_dir": root_dir})

    @staticmethod
    def create_book_store(config: ScanbookConfig) -> FallbackBookStore:
        """
        Remote store at `config.api_base_url`, falling back to a local store in `config.library_dir`.
        """
        remote = RemoteBookStore(config.api_base_url, timeout=config.request_timeout)
        local = LocalBookStore(StorageConfig.create_local_handler(config))
        return FallbackBookStore(remote, local)

    @staticmethod
    def create_library(config: ScanbookConfig) -> DocumentLibrary:
        return DocumentLibrary(StorageConfig.create_local_handler(config))
