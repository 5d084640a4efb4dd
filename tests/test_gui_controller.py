import pytest
from PyQt6.QtCore import QEvent, QPoint, QPointF, Qt
from PyQt6.QtGui import QMouseEvent
from PyQt6.QtTest import QTest
from PyQt6.QtWidgets import QApplication

from Model.coord_ops import to_image_space
from View.gui import PolygonCropGUI


@pytest.fixture
def gui(qapp):
    w = PolygonCropGUI()
    w.resize(1000, 700)
    w.show()
    qapp.processEvents()
    yield w
    w.controller.pool.waitForDone(5000)
    w.close()
    w.deleteLater()
    qapp.processEvents()


def _wait_for_load(gui, qapp):
    gui.controller.pool.waitForDone(5000)
    # Deliver the queued finished/failed signal from the worker
    for _ in range(5):
        qapp.processEvents()


def _add_point(gui, x, y):
    gui.dropArea.pointerPressed.emit(float(x), float(y), 10.0)
    gui.dropArea.pointerReleased.emit()


def test_rejects_non_image_file(gui, qapp, tmp_path):
    txt = tmp_path / "readme.txt"
    txt.write_text("no image")
    gui.controller.load_image(str(txt))
    _wait_for_load(gui, qapp)
    assert "Please select an image file" in gui.statusLine.text()
    assert not gui.controller.session.has_image
    assert not gui.dropArea.has_image()


def test_corrupt_image_reports_error_and_keeps_state(gui, qapp, tmp_path, png_file):
    path, _ = png_file
    gui.controller.load_image(str(path))
    _wait_for_load(gui, qapp)
    _add_point(gui, 5, 5)

    bad = tmp_path / "broken.png"
    bad.write_bytes(b"not really a png")
    gui.controller.load_image(str(bad))
    _wait_for_load(gui, qapp)
    assert gui.statusLine.text().startswith("Could not load image")
    assert gui.controller.session.has_image
    assert len(gui.controller.session.points) == 1


def test_load_add_points_and_crop(gui, qapp, png_file):
    path, rgba = png_file
    gui.controller.load_image(str(path))
    _wait_for_load(gui, qapp)

    session = gui.controller.session
    assert session.has_image
    assert gui.dropArea.has_image()
    crop_btn = gui.imagePanel.toolbarButtons["Crop Image"]
    download_btn = gui.resultPanel.toolbarButtons["Download"]
    assert not crop_btn.isEnabled()

    for p in [(5, 5), (40, 5), (40, 30)]:
        _add_point(gui, *p)
    assert gui.imagePanel.infoLabel.text() == "Points: 3"
    assert crop_btn.isEnabled()
    assert not download_btn.isEnabled()

    crop_btn.click()
    assert session.result is not None
    assert (session.result.width, session.result.height) == (35, 25)
    assert gui.resultView.has_image()
    assert download_btn.isEnabled()

    gui.imagePanel.toolbarButtons["Reset Points"].click()
    assert len(session.points) == 0
    assert session.result is None
    assert not gui.resultView.has_image()
    assert not download_btn.isEnabled()


def test_clear_all(gui, qapp, png_file):
    path, _ = png_file
    gui.controller.load_image(str(path))
    _wait_for_load(gui, qapp)
    gui.imagePanel.toolbarButtons["Whole Image"].click()
    assert len(gui.controller.session.points) == 4

    gui.imagePanel.toolbarButtons["Clear All"].click()
    assert not gui.controller.session.has_image
    assert not gui.dropArea.has_image()
    assert gui.imagePanel.infoLabel.text().startswith("Points: 0")


def test_mouse_click_maps_to_image_pixels(gui, qapp, png_file):
    path, _ = png_file
    gui.controller.load_image(str(path))
    _wait_for_load(gui, qapp)

    canvas = gui.dropArea
    rect = canvas.display_rect()
    assert rect.width > 0 and rect.height > 0
    pos = QPoint(int(rect.left + rect.width / 2), int(rect.top + rect.height / 3))
    QTest.mouseClick(canvas, Qt.MouseButton.LeftButton, Qt.KeyboardModifier.NoModifier, pos)
    qapp.processEvents()

    points = gui.controller.session.points
    assert len(points) == 1
    expected = to_image_space(pos.x(), pos.y(), canvas.display_rect(), 64, 48)
    assert points[0] == pytest.approx(expected)


def _margin_positions(canvas):
    # Widget positions in the letterbox around the aspect-fitted image
    rect = canvas.display_rect()
    cx, cy = int(rect.left + rect.width / 2), int(rect.top + rect.height / 2)
    out = []
    if rect.left >= 4:
        out += [QPoint(int(rect.left / 2), cy), QPoint(int(rect.left + rect.width + rect.left / 2), cy)]
    if rect.top >= 4:
        out += [QPoint(cx, int(rect.top / 2)), QPoint(cx, int(rect.top + rect.height + rect.top / 2))]
    return out


def _send_move(canvas, pos: QPoint):
    ev = QMouseEvent(QEvent.Type.MouseMove, QPointF(pos), QPointF(canvas.mapToGlobal(pos)),
                     Qt.MouseButton.NoButton, Qt.MouseButton.LeftButton, Qt.KeyboardModifier.NoModifier)
    QApplication.sendEvent(canvas, ev)


def test_clicks_beside_the_image_add_no_points(gui, qapp, png_file):
    # Wide window: the 4:3 image leaves empty bands left and right
    gui.resize(1600, 500)
    path, _ = png_file
    gui.controller.load_image(str(path))
    _wait_for_load(gui, qapp)
    qapp.processEvents()

    canvas = gui.dropArea
    margins = _margin_positions(canvas)
    assert margins
    for pos in margins:
        QTest.mouseClick(canvas, Qt.MouseButton.LeftButton, Qt.KeyboardModifier.NoModifier, pos)
    qapp.processEvents()
    assert gui.controller.session.points.as_list() == []


def test_drag_past_the_border_is_clamped_to_the_image(gui, qapp, png_file):
    gui.resize(1600, 500)
    path, _ = png_file
    gui.controller.load_image(str(path))
    _wait_for_load(gui, qapp)
    qapp.processEvents()

    canvas = gui.dropArea
    rect = canvas.display_rect()
    start = QPoint(int(rect.left + rect.width / 2), int(rect.top + rect.height / 2))
    QTest.mouseClick(canvas, Qt.MouseButton.LeftButton, Qt.KeyboardModifier.NoModifier, start)
    assert len(gui.controller.session.points) == 1
    # Second press on the same spot grabs the vertex
    QTest.mousePress(canvas, Qt.MouseButton.LeftButton, Qt.KeyboardModifier.NoModifier, start)
    assert gui.controller.session.drag.is_dragging

    # Far to the left and above the image
    _send_move(canvas, QPoint(max(0, int(rect.left) - 200), max(0, int(rect.top) - 200)))
    QTest.mouseRelease(canvas, Qt.MouseButton.LeftButton, Qt.KeyboardModifier.NoModifier, start)
    qapp.processEvents()

    x, y = gui.controller.session.points[0]
    assert 0.0 <= x <= 64.0 and 0.0 <= y <= 48.0
    assert x == 0.0


def test_unexpected_decode_error_is_reported(gui, qapp, png_file, monkeypatch):
    import Controller.CropController as cc

    def explode(path):
        raise RuntimeError("decoder crashed")

    monkeypatch.setattr(cc, "load_image_file", explode)
    path, _ = png_file
    gui.controller.load_image(str(path))
    _wait_for_load(gui, qapp)
    assert gui.statusLine.text() == "Could not load image: RuntimeError: decoder crashed"
    assert not gui.controller.session.has_image
