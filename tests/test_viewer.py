from __future__ import annotations

import numpy as np
import pytest

cv2 = pytest.importorskip("cv2")

from gesture_fit.gestures.session import MotionSession  # noqa: E402
from gesture_fit.gestures.viewer import DragPad, draw_dashed_line, render_frame  # noqa: E402


def test_render_empty_session() -> None:
    frame = render_frame(MotionSession(), width=640, height=720)
    assert frame.shape == (720, 640, 3)
    assert frame.dtype == np.uint8


def test_render_with_fit_draws_chart() -> None:
    empty = render_frame(MotionSession(), width=640, height=720)

    session = MotionSession()
    session.on_gesture_start()
    for t, y in [(0, 0.0), (10, 1.0), (20, 4.0), (30, 9.0)]:
        session.on_sample(t, y)
    frame = render_frame(session, width=640, height=720)

    chart = slice(0, 355)
    assert not np.array_equal(frame[chart], empty[chart])


def test_render_survives_extreme_forecast() -> None:
    session = MotionSession()
    session.on_gesture_start()
    for t, y in [(0, 0.0), (1, 1e7), (2, -1e7)]:
        session.on_sample(t, y)
    render_frame(session, width=320, height=400)


def test_dashed_line_draws_segments() -> None:
    img = np.zeros((20, 100, 3), dtype=np.uint8)
    draw_dashed_line(img, (0, 10), (99, 10), (255, 255, 255), thickness=1, dash=10)
    row = img[10, :, 0]
    assert row[5] > 0
    assert row[15] == 0


def test_drag_pad_feeds_session() -> None:
    session = MotionSession()
    pad = DragPad(session, pad_top=365)

    pad.on_mouse(cv2.EVENT_LBUTTONDOWN, 100, 100, 0)
    assert not session.active

    pad.on_mouse(cv2.EVENT_LBUTTONDOWN, 100, 400, 0)
    pad.on_mouse(cv2.EVENT_MOUSEMOVE, 100, 410, cv2.EVENT_FLAG_LBUTTON)
    pad.on_mouse(cv2.EVENT_MOUSEMOVE, 100, 420, 0)
    assert session.active
    assert [s.y for s in session.current_window()] == [35.0, 45.0]

    pad.on_mouse(cv2.EVENT_LBUTTONUP, 100, 420, 0)
    assert not session.active
