from scanbook.storage.handlers.storage_handler import StorageHandler, StorageHandlerFactory
from scanbook.storage.handlers.local_handler import LocalStorageHandler
