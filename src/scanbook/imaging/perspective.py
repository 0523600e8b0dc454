"""
Perspective correction for photographed pages: find the page outline and warp
it to a flat rectangle before normalization.
"""
from typing import Optional

import cv2
import numpy as np
from globalog import LOG

from scanbook.imaging import image_bytes_to_ndarray, ndarray_to_image_bytes

DETECTION_HEIGHT = 500


def find_page_outline(image: np.ndarray) -> Optional[np.ndarray]:
    """
    Locate the largest four-cornered contour in the image.

    Args:
        image: BGR image

    Returns:
        Optional[np.ndarray]: The 4 corner points in the coordinates of `image`,
        or None if no quadrilateral outline is found.
    """
    ratio = image.shape[0] / float(DETECTION_HEIGHT)
    small = cv2.resize(image, (max(1, int(image.shape[1] / ratio)), DETECTION_HEIGHT))
    gray = cv2.cvtColor(small, cv2.COLOR_BGR2GRAY)
    edges = cv2.Canny(cv2.GaussianBlur(gray, (5, 5), 0), 75, 200)

    contours, _ = cv2.findContours(edges, cv2.RETR_LIST, cv2.CHAIN_APPROX_SIMPLE)
    for contour in sorted(contours, key=cv2.contourArea, reverse=True)[:5]:
        approx = cv2.approxPolyDP(contour, 0.02 * cv2.arcLength(contour, True), True)
        if len(approx) == 4:
            return approx.reshape(4, 2).astype("float32") * ratio
    return None


def order_corners(pts: np.ndarray) -> np.ndarray:
    """Order 4 points as top-left, top-right, bottom-right, bottom-left."""
    rect = np.zeros((4, 2), dtype="float32")
    s = pts.sum(axis=1)
    rect[0] = pts[np.argmin(s)]
    rect[2] = pts[np.argmax(s)]
    diff = np.diff(pts, axis=1)
    rect[1] = pts[np.argmin(diff)]
    rect[3] = pts[np.argmax(diff)]
    return rect


def warp_to_rectangle(image: np.ndarray, corners: np.ndarray) -> np.ndarray:
    tl, tr, br, bl = order_corners(corners)
    width = int(max(np.linalg.norm(br - bl), np.linalg.norm(tr - tl)))
    height = int(max(np.linalg.norm(tr - br), np.linalg.norm(tl - bl)))
    dst = np.array([[0, 0], [width - 1, 0], [width - 1, height - 1], [0, height - 1]], dtype="float32")
    matrix = cv2.getPerspectiveTransform(np.array([tl, tr, br, bl], dtype="float32"), dst)
    return cv2.warpPerspective(image, matrix, (width, height))


def straighten_page(image_bytes: bytes) -> bytes:
    """
    Straighten a photographed page. Returns the input bytes unchanged when the
    image cannot be decoded here or no page outline is found.
    """
    image = image_bytes_to_ndarray(image_bytes)
    if image is None:
        return image_bytes

    corners = find_page_outline(image)
    if corners is None:
        LOG.debug("No page outline found, keeping the image as captured")
        return image_bytes

    warped = warp_to_rectangle(image, corners)
    if warped.shape[0] < 2 or warped.shape[1] < 2:
        return image_bytes
    encoded = ndarray_to_image_bytes(warped)
    return encoded if encoded is not None else image_bytes
