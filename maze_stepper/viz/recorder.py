import os
import logging
import pygame
import cv2
import numpy as np
from datetime import datetime

logger = logging.getLogger(__name__)

# Frame rate used when the maze is stepped as fast as possible
UNTHROTTLED_FPS = 60

def fps_for_tick(tick_ms: int) -> int:
    """One video frame per engine step, so playback matches the live window."""
    if tick_ms <= 0:
        return UNTHROTTLED_FPS
    return max(1, round(1000 / tick_ms))

def recording_path(width: int, height: int, directory: str = "recordings") -> str:
    os.makedirs(directory, exist_ok=True)
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    return os.path.join(directory, f"gen_dfs_{width}x{height}_{ts}.mp4")

def surface_to_bgr(surface: pygame.Surface) -> np.ndarray:
    # pygame indexes pixels [x, y] in RGB; OpenCV wants [y, x] in BGR
    rgb = pygame.surfarray.array3d(surface).swapaxes(0, 1)
    return np.ascontiguousarray(rgb[:, :, ::-1])

class VideoRecorder:
    """
    Writes one mp4 frame per captured surface. The file is opened lazily,
    sized by the first frame; later frames of another size are scaled to it.
    """
    def __init__(self, output_file: str = None, fps: int = UNTHROTTLED_FPS, active: bool = True):
        if active and not output_file:
            raise ValueError("An active recorder needs an output file")
        self.active = active
        self.output_file = output_file
        self.fps = fps
        self.writer = None
        self.frame_size = None
        self.frame_count = 0

    def capture_frame(self, surface: pygame.Surface):
        if not self.active:
            return

        frame = surface_to_bgr(surface)
        height, width = frame.shape[:2]

        if self.writer is None:
            self.frame_size = (width, height)
            fourcc = cv2.VideoWriter_fourcc(*'mp4v')
            self.writer = cv2.VideoWriter(self.output_file, fourcc, self.fps, self.frame_size)
            logger.info(f"Recording started: {self.output_file} at {self.fps} fps")
        elif (width, height) != self.frame_size:
            frame = cv2.resize(frame, self.frame_size, interpolation=cv2.INTER_NEAREST)

        self.writer.write(frame)
        self.frame_count += 1

    def stop(self):
        if self.writer:
            self.writer.release()
            logger.info(f"Video saved: {self.output_file} ({self.frame_count} frames)")
            self.writer = None
