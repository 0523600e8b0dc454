import uuid
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import Any, Dict, Type, TypeVar

R = TypeVar('R', bound='_Record')


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_id() -> str:
    return str(uuid.uuid4())


class _Record:
    """JSON dict conversion shared by the record types. Field names match the REST API."""

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls: Type[R], data: Dict[str, Any]) -> R:
        # Server columns are nullable; NULL falls back to the field default.
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known and v is not None})


@dataclass
class BookRecord(_Record):
    id: str
    title: str = ""
    author: str = ""
    cover_url: str = ""
    file_path: str = ""
    created_at: str = field(default_factory=_now_iso)

    @classmethod
    def new(cls, title: str, author: str, cover_url: str, file_path: str) -> "BookRecord":
        return cls(id=new_id(), title=title, author=author, cover_url=cover_url, file_path=file_path)


@dataclass
class NoteRecord(_Record):
    id: str
    book_id: str = ""
    page_number: int = 0
    content: str = ""
    highlight_data: str = ""
    created_at: str = field(default_factory=_now_iso)

    def __post_init__(self) -> None:
        self.page_number = int(self.page_number)

    @classmethod
    def new(cls, book_id: str, page_number: int, content: str, highlight_data: str = "") -> "NoteRecord":
        return cls(id=new_id(), book_id=book_id, page_number=page_number, content=content, highlight_data=highlight_data)
