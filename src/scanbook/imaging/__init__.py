from typing import Optional

import cv2
import numpy as np

from scanbook.imaging.normalizer import (
    NormalizeOptions,
    NormalizedImage,
    PageNormalizer,
    CAPTURE_OPTIONS,
    ASSEMBLY_OPTIONS,
    PREVIEW_OPTIONS,
    fit_within,
)


def image_bytes_to_ndarray(image_bytes: bytes) -> Optional[np.ndarray]:
    """
    Decode encoded image bytes (JPEG, PNG, ...) into a BGR numpy array.

    Returns:
        Optional[np.ndarray]: The decoded image, or None if decoding fails.
    """
    if not image_bytes:
        return None
    image_array = np.frombuffer(image_bytes, dtype=np.uint8)
    return cv2.imdecode(image_array, cv2.IMREAD_COLOR)


def ndarray_to_image_bytes(image: np.ndarray, ext: str = '.png') -> Optional[bytes]:
    """
    Encode a BGR numpy array as image bytes (PNG by default).

    Returns:
        Optional[bytes]: The encoded bytes, or None if encoding fails.
    """
    success, buf = cv2.imencode(ext, image)
    if not success:
        return None
    return buf.tobytes()
