"""
Still-frame capture from a live camera stream.

Usage Example:
    from scanbook.capture import CameraSource

    with CameraSource() as camera:
        frame = camera.capture()

The device is held only between `start()` and `stop()`; leaving the `with`
block releases it on every exit path.
"""
from typing import Any, Callable, Optional

import cv2
from globalog import LOG

from scanbook.exceptions import CameraUnavailableError
from scanbook.imaging import ndarray_to_image_bytes


class CameraSource:
    """Scoped owner of one video capture device."""

    def __init__(
        self,
        device_index: int = 0,
        target_width: int = 1920,
        target_height: int = 1080,
        capture_factory: Callable[[int], Any] = cv2.VideoCapture,
    ) -> None:
        """
        Args:
            device_index: Index of the capture device
            target_width: Requested frame width, the device may pick another
            target_height: Requested frame height
            capture_factory: Opens a device by index, returning a cv2.VideoCapture-like object
        """
        self.device_index = device_index
        self.target_width = target_width
        self.target_height = target_height
        self._capture_factory = capture_factory
        self._capture: Optional[Any] = None

    @property
    def is_active(self) -> bool:
        return self._capture is not None

    def start(self) -> None:
        """
        Open the device. A stream that is already open is released first.

        Raises:
            CameraUnavailableError: If the device cannot be opened or delivers no frame
        """
        self.stop()
        capture = self._capture_factory(self.device_index)
        try:
            if not capture.isOpened():
                raise CameraUnavailableError(
                    f"Could not access camera {self.device_index}. Please check permissions."
                )
            capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.target_width)
            capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.target_height)
            ok, _ = capture.read()
            if not ok:
                raise CameraUnavailableError(f"Camera {self.device_index} opened but delivered no frame")
        except Exception as e:
            LOG.error(f"Failed to start camera {self.device_index}", exc_info=e)
            capture.release()
            raise
        self._capture = capture
        LOG.info(f"Camera {self.device_index} started")

    def capture(self) -> bytes:
        """
        Grab one still frame.

        Returns:
            bytes: The frame as lossless PNG, to be normalized by the caller

        Raises:
            CameraUnavailableError: If the camera is not started or the frame read fails
        """
        if self._capture is None:
            raise CameraUnavailableError("Camera is not started")
        ok, frame = self._capture.read()
        if not ok or frame is None:
            raise CameraUnavailableError(f"Camera {self.device_index} delivered no frame")
        encoded = ndarray_to_image_bytes(frame)
        if encoded is None:
            raise CameraUnavailableError("Captured frame could not be encoded")
        LOG.debug(f"Captured frame {frame.shape[1]}x{frame.shape[0]}")
        return encoded

    def stop(self) -> None:
        """Release the device. Safe to call when not started."""
        if self._capture is None:
            return
        capture, self._capture = self._capture, None
        capture.release()
        LOG.info(f"Camera {self.device_index} stopped")

    def __enter__(self) -> "CameraSource":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()

    def __del__(self) -> None:
        if self._capture is not None:
            self._capture.release()
