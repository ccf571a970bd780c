import argparse
import logging
import sys

from PySide6.QtWidgets import QApplication

from visualino import __version__
from visualino.config_resolver import ConfigResolver
from visualino.log import setup_logging
from visualino.ui.main_window import MainWindow


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="visualino", description="Visual programming for Arduino.")
    parser.add_argument("workspace", nargs="?", help="workspace file to open at startup")
    parser.add_argument("--verbose", action="store_true", help="log debug messages to the console")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    args, _qt_args = parser.parse_known_args(argv)
    return args


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv if argv is None else argv)
    args = _parse_args(argv[1:])

    app = QApplication(argv[:1])
    app.setApplicationName("visualino")
    app.setApplicationDisplayName(MainWindow.APP_NAME)
    app.setApplicationVersion(__version__)
    app.setStyle("Fusion")

    setup_logging(console_level=logging.DEBUG if args.verbose else logging.INFO)
    config = ConfigResolver().resolve()

    window = MainWindow(config)
    if args.workspace:
        window.documents.action_open(args.workspace)
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
