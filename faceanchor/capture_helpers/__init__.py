"""
Capture helpers connecting the pipeline to cameras and landmark models.

This package contains helper modules for feeding the frame loop:
- face_mesh: MediaPipe Face Mesh detector adapter
- preprocessing: Frame mirroring for front-facing cameras
- frame_source: OpenCV camera frame source
"""

from .face_mesh import MediaPipeFaceDetector, extract_face_landmarks
from .frame_source import CameraFrameSource
from .preprocessing import mirror_frame

__all__ = [
    "MediaPipeFaceDetector",
    "extract_face_landmarks",
    "CameraFrameSource",
    "mirror_frame",
]
