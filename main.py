# main.py
import logging
import os
import sys

from PyQt6.QtWidgets import QApplication

from View.gui import PolygonCropGUI


def main():
    logging.basicConfig(
        level=os.environ.get("POLYCROP_LOG_LEVEL", "INFO").upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    app = QApplication(sys.argv)
    win = PolygonCropGUI()
    win.resize(1280, 800)
    win.show()
    sys.exit(app.exec())

if __name__ == "__main__":
    main()
