"""
Main entry point for GenSynth.
Launches the main window with the last selected plugin.
"""

import sys

from PyQt5.QtWidgets import QApplication


def main():
    # Initialize logger first
    from gensynth.utils.logger import logger

    logger.info("=" * 40, component="APP")
    logger.info("GenSynth starting", component="APP")
    logger.info("=" * 40, component="APP")

    app = QApplication(sys.argv)
    app.setApplicationName("GenSynth")

    from gensynth.gui.main_window import MainWindow

    window = MainWindow()

    window.show()

    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
