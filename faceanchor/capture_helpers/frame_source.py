"""Camera frame source backed by OpenCV."""

import logging
from typing import Optional, Union

import cv2
import numpy as np

logger = logging.getLogger(__name__)


class CameraFrameSource:
    """
    Callable returning the latest frame from a cv2.VideoCapture.

    Returns None when the capture yields no frame, which the frame loop treats
    as an empty cycle.
    """

    def __init__(self, device: Union[int, str] = 0, capture=None):
        self.capture = capture if capture is not None else cv2.VideoCapture(device)
        if not self.capture.isOpened():
            raise FileNotFoundError(f"Could not open video source {device}")

    @property
    def frame_size(self):
        width = int(self.capture.get(cv2.CAP_PROP_FRAME_WIDTH))
        height = int(self.capture.get(cv2.CAP_PROP_FRAME_HEIGHT))
        return width, height

    def __call__(self) -> Optional[np.ndarray]:
        success, frame = self.capture.read()
        if not success:
            logger.debug("Video source returned no frame")
            return None
        return frame

    def release(self) -> None:
        self.capture.release()
