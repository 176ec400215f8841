"""Split-screen gesture viewer.

Top half: samples, fitted curve, velocity vector and forecast point.
Bottom half: a drag pad; a left-button drag is one gesture. With a camera
source the pad is replaced by fingertip tracking in a background worker.
"""
from __future__ import annotations

import logging
import time

import cv2
import numpy as np

from gesture_fit.gestures.session import MotionSession
from gesture_fit.settings import FitConfig
from gesture_fit.tracking.kinematics import MotionStats, format_stats, sample_curve
from gesture_fit.tracking.mapping import map_point, plot_bounds
from gesture_fit.tracking.window import Sample

logger = logging.getLogger(__name__)

WINDOW_NAME = "Gesture Fit"
CHART_MARGIN = 40.0
PX_LIMIT = 100_000.0

# BGR
BACKGROUND = (245, 242, 240)
PANEL = (255, 255, 255)
AXIS = (211, 211, 211)
POINT = (80, 62, 44)
CURVE = (219, 152, 52)
VECTOR = (60, 76, 231)
PAD_IDLE = (219, 152, 52)
PAD_ACTIVE = (113, 204, 46)
TEXT = (255, 255, 255)


def _pt(x: float, y: float, dy: int = 0) -> tuple[int, int]:
    # Far-off projections must stay inside the int range cv2 accepts.
    x = float(np.clip(x, -PX_LIMIT, PX_LIMIT))
    y = float(np.clip(y, -PX_LIMIT, PX_LIMIT))
    return int(round(x)), int(round(y)) + dy


def draw_dashed_line(
    img: np.ndarray,
    start: tuple[float, float],
    end: tuple[float, float],
    color: tuple[int, int, int],
    thickness: int = 2,
    dash: float = 10.0,
) -> None:
    """Draw a dashed line with equal dash and gap lengths."""
    p0 = np.array(start, dtype=np.float64)
    p1 = np.array(end, dtype=np.float64)
    length = float(np.linalg.norm(p1 - p0))
    if length < 1e-9:
        return
    direction = (p1 - p0) / length
    pos = 0.0
    while pos < length:
        seg_end = min(pos + dash, length)
        a = p0 + direction * pos
        b = p0 + direction * seg_end
        cv2.line(img, _pt(*a), _pt(*b), color, thickness, cv2.LINE_AA)
        pos += 2 * dash


def render_chart(
    img: np.ndarray,
    samples: tuple[Sample, ...],
    stats: MotionStats,
    cfg: FitConfig,
    top: int = 0,
    height: int | None = None,
) -> None:
    """Draw the motion chart into the band ``[top, top + height)`` of ``img``."""
    width = img.shape[1]
    height = img.shape[0] - top if height is None else height
    cv2.rectangle(img, (0, top), (width - 1, top + height - 1), PANEL, -1)

    bounds = plot_bounds(samples, cfg.y_padding, cfg.min_t_range, cfg.min_y_range)
    if bounds is None:
        cv2.putText(img, "No data", (width // 2 - 40, top + height // 2),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.7, POINT, 2, cv2.LINE_AA)
        return

    def to_px(t: float, y: float) -> tuple[int, int]:
        return _pt(*map_point(bounds, t, y, width, height, CHART_MARGIN), dy=top)

    m = int(CHART_MARGIN)
    cv2.line(img, (m, top + m), (m, top + height - m), AXIS, 1)
    cv2.line(img, (m, top + height - m), (width - m, top + height - m), AXIS, 1)

    for s in samples:
        cv2.circle(img, to_px(s.t, s.y), 5, POINT, -1, cv2.LINE_AA)

    fit = stats.fit
    if fit is None or stats.tangent is None:
        return

    curve = sample_curve(fit, bounds.min_t, bounds.max_t, cfg.curve_steps)
    pts = np.array([to_px(t, y) for t, y in curve], dtype=np.int32).reshape((-1, 1, 2))
    cv2.polylines(img, [pts], False, CURVE, 3, cv2.LINE_AA)

    (t0, y0), (t1, y1) = stats.tangent
    draw_dashed_line(img, to_px(t0, y0), to_px(t1, y1), VECTOR, 2)
    if stats.forecast is not None:
        cv2.circle(img, to_px(*stats.forecast), 6, VECTOR, 1, cv2.LINE_AA)


def render_stats(img: np.ndarray, stats: MotionStats, top: int = 0) -> None:
    """Draw the stats overlay in the top-right corner of a band."""
    lines = format_stats(stats)
    line_h = 18
    box_w = 260
    box_h = line_h * len(lines) + 12
    x0 = max(0, img.shape[1] - box_w - 10)
    y0 = top + 10
    roi = img[y0:y0 + box_h, x0:x0 + box_w]
    img[y0:y0 + box_h, x0:x0 + box_w] = cv2.addWeighted(np.zeros_like(roi), 0.73, roi, 0.27, 0)
    for idx, text in enumerate(lines):
        cv2.putText(img, text, (x0 + 8, y0 + 18 + idx * line_h),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.45, TEXT, 1, cv2.LINE_AA)


def render_frame(
    session: MotionSession,
    width: int = 640,
    height: int = 720,
    pad_label: str = "DRAW GESTURE HERE",
) -> np.ndarray:
    """Render the full split-screen frame for the session's current state."""
    img = np.full((height, width, 3), BACKGROUND, dtype=np.uint8)
    half = height // 2
    stats = session.current_stats()
    render_chart(img, session.current_window(), stats, session.cfg, top=0, height=half - 5)

    border = PAD_ACTIVE if session.active else PAD_IDLE
    cv2.rectangle(img, (0, half + 5), (width - 1, height - 1), PANEL, -1)
    cv2.rectangle(img, (20, half + 25), (width - 21, height - 21), border, 3)
    (tw, _), _ = cv2.getTextSize(pad_label, cv2.FONT_HERSHEY_SIMPLEX, 0.9, 2)
    cv2.putText(img, pad_label, ((width - tw) // 2, half + (height - half) // 2),
                cv2.FONT_HERSHEY_SIMPLEX, 0.9, PAD_IDLE, 2, cv2.LINE_AA)
    render_stats(img, stats, top=half + 5)
    return img


class DragPad:
    """Turns mouse events on the lower half of the window into gesture calls."""

    def __init__(self, session: MotionSession, pad_top: int) -> None:
        """Initialize the drag pad."""
        self.session = session
        self.pad_top = pad_top
        self._start_time = 0.0
        self._dragging = False

    def _elapsed_ms(self) -> int:
        return int((time.monotonic() - self._start_time) * 1000)

    def on_mouse(self, event: int, x: int, y: int, flags: int, _param: object = None) -> None:
        """Handle an OpenCV mouse event."""
        if event == cv2.EVENT_LBUTTONDOWN and y >= self.pad_top:
            self._dragging = True
            self._start_time = time.monotonic()
            self.session.on_gesture_start()
            self.session.on_sample(0, float(y - self.pad_top))
        elif event == cv2.EVENT_MOUSEMOVE and self._dragging and flags & cv2.EVENT_FLAG_LBUTTON:
            self.session.on_sample(self._elapsed_ms(), float(y - self.pad_top))
        elif event == cv2.EVENT_LBUTTONUP and self._dragging:
            self._dragging = False
            self.session.on_gesture_end()


def run_viewer(
    session: MotionSession,
    camera: int | str | None = None,
    width: int = 640,
    height: int = 720,
) -> None:
    """Show the viewer until ESC is pressed."""
    exit_key: int = 27  # ESC
    capture = None
    cv2.namedWindow(WINDOW_NAME)

    if camera is None:
        pad = DragPad(session, pad_top=height // 2 + 5)
        cv2.setMouseCallback(WINDOW_NAME, pad.on_mouse)
        label = "DRAW GESTURE HERE"
    else:
        from gesture_fit.gestures.hand_capture import HandCapture

        capture = HandCapture(session, camera=camera)
        capture.start()
        label = "TRACKING FINGERTIP"

    try:
        while True:
            cv2.imshow(WINDOW_NAME, render_frame(session, width, height, label))
            if cv2.waitKey(15) & 0xFF == exit_key:
                break
    except Exception:
        logger.exception("Viewer crashed")
    finally:
        if capture is not None:
            capture.stop()
        try:
            cv2.destroyWindow(WINDOW_NAME)
        except Exception:
            logger.exception("Could not destroy window")
