"""Background worker that tracks the index fingertip and feeds a motion session."""
from __future__ import annotations

import logging
import threading
import time
from contextlib import suppress

from gesture_fit.gestures.session import MotionSession

logger = logging.getLogger(__name__)

INDEX_TIP = 8


class HandCapture:
    """Background worker that reads a camera and reports fingertip height.

    A gesture starts when a hand appears and ends when it is lost for
    ``lost_frames`` consecutive frames. Heavy dependencies (OpenCV, MediaPipe)
    are imported lazily in the thread.
    """

    def __init__(
        self,
        session: MotionSession,
        camera: int | str = 0,
        flip: bool = True,  # noqa: FBT001, FBT002
        lost_frames: int = 5,
        min_detection_confidence: float = 0.5,
    ) -> None:
        """Initialize the hand capture worker."""
        self.session = session
        self.camera = camera
        self.flip = flip
        self.lost_frames = max(1, int(lost_frames))
        self.min_detection_confidence = min_detection_confidence

        self._thread: threading.Thread | None = None
        self._running = False

    def start(self) -> None:
        """Start the worker."""
        if self._running:
            return
        self._running = True
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop the worker."""
        self._running = False
        if self._thread is not None:
            self._thread.join(timeout=2.0)
            self._thread = None

    def _open_camera(self):  # noqa: ANN202
        import cv2

        try:
            return cv2.VideoCapture(int(self.camera))
        except ValueError:
            return cv2.VideoCapture(self.camera)

    def _run(self) -> None:
        """Run the worker."""
        import cv2
        import mediapipe as mp

        cap = self._open_camera()
        if not cap.isOpened():
            logger.warning("Could not open camera %s for hand capture", self.camera)
            self._running = False
            return

        hands = mp.solutions.hands.Hands(static_image_mode=False,
                                         max_num_hands=1,
                                         min_detection_confidence=self.min_detection_confidence,
                                         min_tracking_confidence=0.5)
        start_time = 0.0
        missing = 0
        tracking = False

        try:
            while self._running:
                ok, frame = cap.read()
                if not ok:
                    time.sleep(0.01)
                    continue
                if self.flip:
                    frame = cv2.flip(frame, 1)

                h = frame.shape[0]
                res = hands.process(cv2.cvtColor(frame, cv2.COLOR_BGR2RGB))
                now = time.monotonic()

                if res.multi_hand_landmarks:
                    missing = 0
                    tip = res.multi_hand_landmarks[0].landmark[INDEX_TIP]
                    y_px = float(tip.y) * h
                    if not tracking:
                        tracking = True
                        start_time = now
                        self.session.on_gesture_start()
                    self.session.on_sample(int((now - start_time) * 1000), y_px)
                elif tracking:
                    missing += 1
                    if missing >= self.lost_frames:
                        tracking = False
                        self.session.on_gesture_end()
        except Exception:
            logger.exception("Hand capture crashed")
        finally:
            with suppress(Exception):
                hands.close()
            cap.release()
            self._running = False
