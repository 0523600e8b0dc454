from scanbook.capture.camera import CameraSource
from scanbook.capture.file_source import FileImageSource, FileSelection, IMAGE_EXTENSIONS
