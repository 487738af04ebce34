from __future__ import annotations

import argparse
import logging
import sys

from PySide6.QtCore import QEvent, QObject, QSettings, Qt, QUrl, Signal
from PySide6.QtGui import QAction, QColor, QImageReader, QPixmap
from PySide6.QtWidgets import (
    QApplication,
    QDialog,
    QDialogButtonBox,
    QFileDialog,
    QFormLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QScrollArea,
    QSpinBox,
    QWidget,
)

from app.justifiedgrid.errors import JustifiedGridError
from app.justifiedgrid.layout.models import FinalizedRow, GridImage
from app.justifiedgrid.layout.placement import place_rows
from app.justifiedgrid.layout.relayout import RelayoutController
from app.justifiedgrid.main import DEFAULT_MANIFEST, load_images
from app.justifiedgrid.media.catalog import load_manifest, scan_folder
from app.justifiedgrid.settings import DEFAULT_SETTINGS, GridSettings

logger = logging.getLogger(__name__)

PLACEHOLDER_COLOR = "#3c4043"


def load_settings(store: QSettings) -> GridSettings:
    try:
        return DEFAULT_SETTINGS.with_overrides(
            min_row_height=int(store.value("layout/min_row_height", DEFAULT_SETTINGS.min_row_height, type=int)),
            max_row_height=int(store.value("layout/max_row_height", DEFAULT_SETTINGS.max_row_height, type=int)),
            gutter=int(store.value("layout/gutter", DEFAULT_SETTINGS.gutter, type=int)),
        )
    except ValueError:
        logger.warning("Ignoring invalid stored layout settings")
        return DEFAULT_SETTINGS


def save_settings(store: QSettings, settings: GridSettings) -> None:
    store.setValue("layout/min_row_height", settings.min_row_height)
    store.setValue("layout/max_row_height", settings.max_row_height)
    store.setValue("layout/gutter", settings.gutter)


class Bridge(QObject):
    # Emitted from the relayout timer thread; Qt queues it onto the GUI thread.
    layoutReady = Signal(object)


class GridCanvas(QWidget):
    """Positions one QLabel per image from precomputed placements."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._labels: dict[str, QLabel] = {}
        self._pixmaps: dict[str, QPixmap] = {}

    def _pixmap_for(self, img: GridImage) -> QPixmap:
        cached = self._pixmaps.get(img.id)
        if cached is not None:
            return cached
        pm = QPixmap()
        url = QUrl(img.src)
        local = url.toLocalFile() if url.isLocalFile() else ""
        if local:
            reader = QImageReader(local)
            reader.setAutoTransform(True)
            image = reader.read()
            if not image.isNull():
                pm = QPixmap.fromImage(image)
        if pm.isNull():
            pm = QPixmap(8, 8)
            pm.fill(QColor(PLACEHOLDER_COLOR))
        self._pixmaps[img.id] = pm
        return pm

    def clear_cache(self) -> None:
        for label in self._labels.values():
            label.deleteLater()
        self._labels.clear()
        self._pixmaps.clear()

    def set_rows(self, rows: list[FinalizedRow], gutter: int) -> None:
        placements, total_height = place_rows(rows, gutter)
        by_id = {img.id: img for row in rows for img in row.images}
        margins = self.contentsMargins()

        seen: set[str] = set()
        for p in placements:
            label = self._labels.get(p.key)
            if label is None:
                label = QLabel(self)
                label.setScaledContents(True)
                label.setToolTip(p.src)
                label.setPixmap(self._pixmap_for(by_id[p.key]))
                self._labels[p.key] = label
            label.setGeometry(margins.left() + p.x, margins.top() + p.y, p.width, p.height)
            label.show()
            seen.add(p.key)

        for key in list(self._labels):
            if key not in seen:
                self._labels.pop(key).deleteLater()

        self.setMinimumHeight(total_height + margins.top() + margins.bottom())


class SettingsDialog(QDialog):
    def __init__(self, settings: GridSettings, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Layout Settings")
        form = QFormLayout(self)

        self.min_spin = QSpinBox(self)
        self.min_spin.setRange(1, 4000)
        self.min_spin.setValue(settings.min_row_height)
        self.max_spin = QSpinBox(self)
        self.max_spin.setRange(1, 4000)
        self.max_spin.setValue(settings.max_row_height)
        self.gutter_spin = QSpinBox(self)
        self.gutter_spin.setRange(0, 200)
        self.gutter_spin.setValue(settings.gutter)

        form.addRow("Min row height (px)", self.min_spin)
        form.addRow("Max row height (px)", self.max_spin)
        form.addRow("Gutter (px)", self.gutter_spin)

        buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel, parent=self
        )
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)
        form.addRow(buttons)

    def values(self) -> dict[str, int]:
        return {
            "min_row_height": self.min_spin.value(),
            "max_row_height": self.max_spin.value(),
            "gutter": self.gutter_spin.value(),
        }


class MainWindow(QMainWindow):
    def __init__(self, images: list[GridImage]) -> None:
        super().__init__()
        self.setWindowTitle("JustifiedGrid")
        self.resize(1200, 800)

        self.store = QSettings("JustifiedGrid", "JustifiedGrid")
        settings = load_settings(self.store)

        self.bridge = Bridge()
        self.bridge.layoutReady.connect(self._apply_rows)
        self.controller = RelayoutController(images, settings, on_layout=self.bridge.layoutReady.emit)

        self.canvas = GridCanvas()
        self.canvas.setContentsMargins(8, 8, 8, 8)
        self.scroll = QScrollArea(self)
        self.scroll.setWidgetResizable(True)
        self.scroll.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.scroll.setWidget(self.canvas)
        self.setCentralWidget(self.scroll)

        self._mounted = False
        self.scroll.viewport().installEventFilter(self)
        self._build_menu()

    def _build_menu(self) -> None:
        menubar = self.menuBar()

        file_menu = menubar.addMenu("&File")
        open_folder = QAction("Open &Folder...", self)
        open_folder.triggered.connect(self.choose_folder)
        file_menu.addAction(open_folder)
        open_manifest = QAction("Open &Manifest...", self)
        open_manifest.triggered.connect(self.choose_manifest)
        file_menu.addAction(open_manifest)

        edit_menu = menubar.addMenu("&Edit")
        settings_action = QAction("&Settings", self)
        settings_action.triggered.connect(self.open_settings)
        edit_menu.addAction(settings_action)

    def _container_width(self) -> int:
        margins = self.canvas.contentsMargins()
        return self.scroll.viewport().width() - margins.left() - margins.right()

    def _apply_rows(self, rows: list[FinalizedRow]) -> None:
        self.canvas.set_rows(rows, self.controller.settings.gutter)
        self.statusBar().showMessage(
            f"{sum(len(r) for r in rows)} images in {len(rows)} rows at {self.controller.container_width}px"
        )

    def _replace_images(self, images: list[GridImage]) -> None:
        self.canvas.clear_cache()
        self.controller.set_images(images)

    def choose_folder(self) -> None:
        folder = QFileDialog.getExistingDirectory(self, "Choose image folder")
        if not folder:
            return
        try:
            self._replace_images(scan_folder(folder))
        except OSError as e:
            QMessageBox.warning(self, "Open Folder", str(e))

    def choose_manifest(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Choose manifest", "", "JSON (*.json)")
        if not path:
            return
        try:
            self._replace_images(load_manifest(path))
        except JustifiedGridError as e:
            QMessageBox.warning(self, "Open Manifest", str(e))

    def open_settings(self) -> None:
        dialog = SettingsDialog(self.controller.settings, self)
        if dialog.exec() != QDialog.DialogCode.Accepted:
            return
        try:
            settings = self.controller.settings.with_overrides(**dialog.values())
        except ValueError as e:
            QMessageBox.warning(self, "Layout Settings", str(e))
            return
        save_settings(self.store, settings)
        self.controller.update_settings(settings)

    def showEvent(self, event) -> None:  # type: ignore[override]
        super().showEvent(event)
        if not self._mounted:
            self._mounted = True
            self.controller.relayout_now(self._container_width())

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:  # type: ignore[override]
        # The viewport also shrinks when the vertical scrollbar appears, not only on window resizes.
        if watched is self.scroll.viewport() and event.type() == QEvent.Type.Resize and self._mounted:
            self.controller.container_resized(self._container_width())
        return super().eventFilter(watched, event)

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self.controller.close()
        super().closeEvent(event)


def main() -> None:
    parser = argparse.ArgumentParser(description="JustifiedGrid viewer")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--manifest", help=f"JSON image manifest (default: {DEFAULT_MANIFEST})")
    source.add_argument("--folder", help="Folder of images to show")
    args, qt_args = parser.parse_known_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    app = QApplication([sys.argv[0], *qt_args])
    app.setOrganizationName("JustifiedGrid")
    app.setApplicationName("JustifiedGrid")

    try:
        images = load_images(args.manifest, args.folder)
    except (JustifiedGridError, OSError) as e:
        logger.error("Could not load images: %s", e)
        images = []

    win = MainWindow(images)
    win.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
