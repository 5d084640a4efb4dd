from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QFrame, QHBoxLayout, QLabel, QPushButton, QSizePolicy, QVBoxLayout, QWidget

# (key, button text, tooltip)
ButtonSpec = tuple[str, str, str]


class Panel(QFrame):
    # Titled frame: header line, a row of tool buttons and one content widget below.
    def __init__(self, title: str):
        super().__init__()
        self.setFrameShape(QFrame.Shape.StyledPanel)
        self.setFrameShadow(QFrame.Shadow.Raised)

        # Header: title on the left, optional info text on the right
        header = QWidget()
        header.setFixedHeight(24)
        hl = QHBoxLayout(header)
        hl.setContentsMargins(6, 2, 6, 2)
        self.titleLabel = QLabel(title)
        self.infoLabel = QLabel("")
        self.infoLabel.setAlignment(Qt.AlignmentFlag.AlignVCenter | Qt.AlignmentFlag.AlignRight)
        hl.addWidget(self.titleLabel)
        hl.addStretch(1)
        hl.addWidget(self.infoLabel)

        # Tool buttons, left aligned
        self.toolbar = QWidget()
        self.toolbar.setFixedHeight(50)
        self._buttonRow = QHBoxLayout(self.toolbar)
        self._buttonRow.setContentsMargins(8, 4, 8, 4)
        self._buttonRow.setSpacing(8)
        self._buttonRow.addStretch(1)

        self._layout = QVBoxLayout(self)
        self._layout.setContentsMargins(0, 0, 0, 0)
        self._layout.setSpacing(0)
        self._layout.addWidget(header)
        self._layout.addWidget(self.toolbar)
        self.contentArea: QWidget | None = None

        # Buttons by key, so the controller can wire and enable them
        self.toolbarButtons: dict[str, QPushButton] = {}

    def add_buttons(self, specs: list[ButtonSpec]):
        # Insert in front of the trailing stretch
        for key, text, tip in specs:
            btn = QPushButton(text)
            btn.setMinimumHeight(36)
            if tip:
                btn.setToolTip(tip)
            self._buttonRow.insertWidget(self._buttonRow.count() - 1, btn)
            self.toolbarButtons[key] = btn

    def set_info(self, text: str):
        self.infoLabel.setText(text)

    def set_content(self, widget: QWidget):
        if self.contentArea is not None:
            self._layout.removeWidget(self.contentArea)
            self.contentArea.deleteLater()
        self.contentArea = widget
        widget.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self._layout.addWidget(widget, 1)
