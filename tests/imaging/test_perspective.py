import cv2
import numpy as np

from scanbook.imaging import image_bytes_to_ndarray, ndarray_to_image_bytes
from scanbook.imaging.perspective import order_corners, straighten_page


def _skewed_page() -> bytes:
    canvas = np.zeros((600, 800, 3), dtype=np.uint8)
    corners = np.array([[180, 90], [620, 60], [660, 540], [150, 520]], dtype=np.int32)
    cv2.fillPoly(canvas, [corners], (255, 255, 255))
    return ndarray_to_image_bytes(canvas)


def test_order_corners() -> None:
    """Test that corners are ordered top-left, top-right, bottom-right, bottom-left."""
    pts = np.array([[10, 90], [90, 90], [10, 10], [90, 10]], dtype="float32")
    ordered = order_corners(pts)
    assert ordered.tolist() == [[10, 10], [90, 10], [90, 90], [10, 90]]


def test_straighten_crops_to_page_outline() -> None:
    """Test that a photographed page is warped to its outline."""
    original = _skewed_page()
    straightened = straighten_page(original)
    assert straightened != original
    image = image_bytes_to_ndarray(straightened)
    assert image.shape[0] < 600 and image.shape[1] < 800
    assert image.mean() > 200


def test_straighten_keeps_image_without_outline() -> None:
    """Test that a featureless image is returned unchanged."""
    blank = ndarray_to_image_bytes(np.full((200, 300, 3), 128, dtype=np.uint8))
    assert straighten_page(blank) == blank


def test_straighten_keeps_undecodable_bytes() -> None:
    assert straighten_page(b"junk") == b"junk"
    assert image_bytes_to_ndarray(b"") is None
