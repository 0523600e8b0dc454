from abc import ABC, abstractmethod
from typing import Any, Dict


class StorageHandler(ABC):
    @abstractmethod
    def download(self, relative_path: str) -> bytes:
        """Read the resource at the path and return its bytes."""
        raise NotImplementedError()

    @abstractmethod
    def upload(self, data: bytes, relative_path: str) -> bool:
        """Write the bytes to the path, replacing any previous content."""
        raise NotImplementedError()

    @abstractmethod
    def exists(self, relative_path: str) -> bool:
        raise NotImplementedError()


class StorageHandlerFactory:
    @staticmethod
    def get_handler(storage_type: str, storage_config: Dict[str, Any]) -> StorageHandler:
        storage_type = storage_type.upper()
        if storage_type == "LOCAL":
            from scanbook.storage.handlers.local_handler import LocalStorageHandler
            return LocalStorageHandler(storage_config['root_dir'])
        else:
            raise ValueError(f"Unsupported storage type: {storage_type}")
