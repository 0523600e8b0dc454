from dataclasses import dataclass


@dataclass(frozen=True)
class PendingPage:
    """
    One normalized page awaiting assembly.

    Attributes:
        image_data: JPEG bytes embedded into the PDF as they are
        preview: Small JPEG thumbnail for redisplay
        width: Pixel width of `image_data`
        height: Pixel height of `image_data`
    """
    image_data: bytes
    preview: bytes
    width: int
    height: int

    def __repr__(self) -> str:
        return f"PendingPage({self.width}x{self.height}, {len(self.image_data)} bytes)"
