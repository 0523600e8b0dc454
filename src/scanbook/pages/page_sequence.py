from typing import Iterator, List, Optional

from globalog import LOG

from scanbook.pages.pending_page import PendingPage


class PageSequence:
    """
    Ordered collection of pending pages. Insertion order is PDF page order;
    positions are contiguous from 0 and shift down on removal.

    Not thread-safe: a sequence is owned by a single scan session.
    """

    def __init__(self, pages: Optional[List[PendingPage]] = None) -> None:
        self._pages: List[PendingPage] = list(pages or [])

    def append(self, page: PendingPage) -> int:
        """
        Add a page at the end.

        Returns:
            int: The position of the new page
        """
        self._pages.append(page)
        return len(self._pages) - 1

    def remove_at(self, index: int) -> Optional[PendingPage]:
        """
        Remove the page at `index`, shifting later pages down by one.
        An out-of-range index is ignored.

        Returns:
            Optional[PendingPage]: The removed page, or None if nothing was removed
        """
        if not 0 <= index < len(self._pages):
            LOG.debug(f"Ignoring removal of page {index}, sequence has {len(self._pages)} pages")
            return None
        return self._pages.pop(index)

    def to_ordered_list(self) -> List[PendingPage]:
        """Return a snapshot of the pages in assembly order."""
        return list(self._pages)

    def clear(self) -> None:
        self._pages.clear()

    def __len__(self) -> int:
        return len(self._pages)

    def __iter__(self) -> Iterator[PendingPage]:
        return iter(self.to_ordered_list())

    def __getitem__(self, index: int) -> PendingPage:
        return self._pages[index]

    def __bool__(self) -> bool:
        return bool(self._pages)
