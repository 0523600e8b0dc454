from pathlib import Path
from typing import Union

from dstools.common.io_utils import read_bytes, write_bytes
from globalog import LOG

from scanbook.storage.handlers.storage_handler import StorageHandler


class LocalStorageHandler(StorageHandler):

    def __init__(self, root_dir: Union[str, Path]):
        self._root = Path(root_dir).expanduser()

    def download(self, relative_path: str) -> bytes:
        return read_bytes(self._root / relative_path)

    def upload(self, data: bytes, relative_path: str) -> bool:
        target = self._root / relative_path
        target.parent.mkdir(parents=True, exist_ok=True)
        LOG.debug(f"Writing {len(data)} bytes to {target}")
        write_bytes(target, data)
        return True

    def exists(self, relative_path: str) -> bool:
        return (self._root / relative_path).is_file()
