"""
Frame pre-processing helpers.

Front-facing cameras deliver a mirror image of the user; flipping the frame
horizontally before detection keeps landmarks in the canonical facing
convention.
"""

import cv2
import numpy as np


def mirror_frame(frame: np.ndarray, mirror: bool) -> np.ndarray:
    """
    Optionally flip a frame around its vertical axis.

    Args:
        frame (np.ndarray): Image in HxW or HxWxC layout
        mirror (bool): Whether to flip horizontally

    Returns:
        np.ndarray: The flipped frame, or the input frame unchanged
    """
    if not mirror:
        return frame
    return cv2.flip(frame, 1)
