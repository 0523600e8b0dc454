import asyncio
from functools import partial
from typing import Any, Callable, Optional, TypeVar

from scanbook.assembly.pdf_assembler import AssembledDocument
from scanbook.capture.camera import CameraSource
from scanbook.pages.pending_page import PendingPage
from scanbook.session import ScanSession
from scanbook.storage.records import BookRecord

T = TypeVar('T')


class AsyncScanSession:
    """
    Awaitable front of a ScanSession. Each operation runs in the default
    executor; operations run one at a time in the order they were awaited.
    """

    def __init__(self, session: ScanSession):
        if not isinstance(session, ScanSession):
            raise TypeError("session must be an instance of ScanSession")
        self.session = session
        self._lock = asyncio.Lock()

    async def add_image_bytes(self, image_data: bytes) -> PendingPage:
        return await self._run(self.session.add_image_bytes, image_data)

    async def capture_from(self, camera: CameraSource) -> PendingPage:
        return await self._run(self.session.capture_from, camera)

    async def remove_page(self, index: int) -> Optional[PendingPage]:
        return await self._run(self.session.remove_page, index)

    async def assemble(self) -> AssembledDocument:
        return await self._run(self.session.assemble)

    async def finalize(self, title: str = "", author: str = "") -> BookRecord:
        return await self._run(self.session.finalize, title, author)

    async def _run(self, func: Callable[..., T], *args: Any) -> T:
        async with self._lock:
            loop = asyncio.get_running_loop()
            return await loop.run_in_executor(None, partial(func, *args))
