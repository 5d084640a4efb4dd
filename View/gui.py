from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QWidget, QVBoxLayout, QSplitter, QLineEdit, QSizePolicy

from Controller.CropController import CropController
from Model.config import MIN_POLYGON_POINTS, STATUS_COLORS
from .dropArea import ImageDropArea
from .panel import Panel
from .zoom_view import ResultView


class PolygonCropGUI(QWidget):
    def __init__(self):
        super().__init__()
        self.setWindowTitle("Polygon Image Cropper")
        self._init_ui()
        self.controller = CropController(self)

    def _init_ui(self):
        self.setAutoFillBackground(True)
        self.setMinimumSize(900, 600)

        # Left: image with the polygon, right: the cropped result
        mainSplitter = QSplitter(Qt.Orientation.Horizontal)
        self.imagePanel = Panel("Image")
        self.resultPanel = Panel("Cropped Result")
        mainSplitter.addWidget(self.imagePanel)
        mainSplitter.addWidget(self.resultPanel)
        mainSplitter.setStretchFactor(0, 2)
        mainSplitter.setStretchFactor(1, 1)

        # Set Main Layout
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)
        layout.addWidget(mainSplitter)

        self._setup_toolbars()
        self._setup_content()
        self._setup_status_line(layout)

    # ------- Helper function to build the toolBar Buttons -------
    def _setup_toolbars(self):
        self.imagePanel.add_buttons([
            ("New Image", "New Image", "Load a new image. Images can also be dropped onto the canvas."),
            ("Whole Image", "Whole Image", "Start from a rectangle around the whole image, \n"
                                           "then drag its corners to the region you want."),
            ("Reset Points", "Reset Points", "Reset all points"),
            ("Crop Image", "Crop Image", f"Need at least {MIN_POLYGON_POINTS} points to crop"),
            ("Clear All", "Clear All", "Clear everything: image, points and result"),
        ])
        self.resultPanel.add_buttons([
            ("Download", "Download", "Save the cropped image as PNG"),
        ])

    def _setup_content(self):
        self.dropArea = ImageDropArea("Drop an image here or click 'New Image'\n"
                                      "Click to add points, drag to move them.")
        self.imagePanel.set_content(self.dropArea)

        self.resultView = ResultView()
        self.resultPanel.set_content(self.resultView)

    def _setup_status_line(self, layout: QVBoxLayout):
        self.statusLine = QLineEdit()
        self.statusLine.setReadOnly(True)
        self.statusLine.setPlaceholderText("Load an image to start")
        self.statusLine.setFixedHeight(22)
        self.statusLine.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Fixed)
        self.set_status("", kind="info")
        layout.addWidget(self.statusLine)

    # ---- Public API for the controller ----
    def set_status(self, text: str, *, kind: str = "info"):
        col = STATUS_COLORS.get(kind, STATUS_COLORS["info"])
        self.statusLine.setStyleSheet(f"QLineEdit {{ background:#1e1e1e; color:{col}; padding:2px 6px; }}")
        self.statusLine.setText(text)

    def set_point_count(self, n: int):
        text = f"Points: {n}"
        if n < MIN_POLYGON_POINTS:
            text += f"  (need at least {MIN_POLYGON_POINTS} points to crop)"
        self.imagePanel.set_info(text)
