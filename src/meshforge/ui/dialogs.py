"""Blocking dialogs the host application composes around the mesh engine:
file open/save pickers, a cancellable progress dialog and a splash screen.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, Optional, Sequence, Union

from PySide6.QtCore import QCoreApplication, Qt
from PySide6.QtGui import QGuiApplication, QPixmap
from PySide6.QtWidgets import QFileDialog, QProgressDialog, QSplashScreen, QWidget

logger = logging.getLogger(__name__)

# advance(milestone) -> True when the user asked to cancel
AdvanceFn = Callable[[bool], bool]


def file_filter(description: str, extensions: Sequence[str]) -> str:
    """Qt name filter such as ``"Images (*.png *.jpg)"``."""
    if not extensions:
        raise ValueError("At least one file extension is required")
    patterns = " ".join(f"*.{ext.lstrip('.')}" for ext in extensions)
    return f"{description} ({patterns})"


def ensure_extension(path: str, extension: str) -> str:
    """Append ``extension`` unless ``path`` already ends with it."""
    if not extension:
        raise ValueError("A file extension is required")
    suffix = "." + extension.lstrip(".")
    if path.lower().endswith(suffix.lower()):
        return path
    return path + suffix


def choose_file(
    description: str,
    extensions: Sequence[str],
    parent: Optional[QWidget] = None,
) -> Optional[str]:
    """Modal file-open picker.  Returns the chosen path, or None on cancel."""
    name_filter = file_filter(description, extensions)
    path, _ = QFileDialog.getOpenFileName(parent, description, "", name_filter)
    return path or None


def save_file(
    description: str,
    extension: str,
    parent: Optional[QWidget] = None,
) -> Optional[str]:
    """Modal file-save picker restricted to one extension.

    The extension is appended to the chosen path when missing.  Returns
    None on cancel.
    """
    name_filter = file_filter(description, [extension])
    path, _ = QFileDialog.getSaveFileName(parent, description, "", name_filter)
    if not path:
        return None
    return ensure_extension(path, extension)


class CancellationToken:
    """Cancellation flag shared between a progress dialog and its work."""

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


@contextmanager
def _progress_dialog(title: str, steps: int, parent: Optional[QWidget]) -> Iterator[QProgressDialog]:
    dialog = QProgressDialog(title, "Cancel", 0, steps, parent)
    dialog.setWindowTitle(title)
    dialog.setWindowModality(Qt.WindowModality.ApplicationModal)
    dialog.setMinimumDuration(0)
    dialog.setAutoClose(False)
    dialog.setAutoReset(False)
    dialog.setValue(0)
    dialog.show()
    try:
        yield dialog
    finally:
        dialog.close()
        dialog.deleteLater()


def run_with_progress(
    title: str,
    steps: int,
    work: Callable[[AdvanceFn], None],
    parent: Optional[QWidget] = None,
    token: Optional[CancellationToken] = None,
) -> bool:
    """Run ``work`` under a modal progress dialog with a Cancel button.

    ``work`` receives ``advance(milestone=True)``: a milestone steps the bar
    by one; every call pumps pending window events and returns True once
    cancellation has been requested, at which point ``work`` should return.

    Returns False if the run was cancelled.  The dialog is closed on every
    exit path, including exceptions raised by ``work``.
    """
    if steps < 1:
        raise ValueError(f"Progress needs at least one step, got {steps}")
    token = token if token is not None else CancellationToken()
    with _progress_dialog(title, steps, parent) as dialog:

        # Polled rather than connected: closing the dialog emits canceled
        def advance(milestone: bool = True) -> bool:
            if token.cancelled:
                return True
            if milestone and dialog.value() < steps:
                dialog.setValue(dialog.value() + 1)
            QCoreApplication.processEvents()
            if dialog.wasCanceled():
                token.cancel()
            return token.cancelled

        work(advance)

    if token.cancelled:
        logger.info("'%s' cancelled", title)
    return not token.cancelled


def show_splash(image: Union[QPixmap, str, Path]) -> Callable[[], None]:
    """Show a frameless splash image centred on the primary screen.

    Returns a close callback; only its first call has an effect.
    """
    pixmap = image if isinstance(image, QPixmap) else QPixmap(str(image))
    splash = QSplashScreen(pixmap, Qt.WindowType.WindowStaysOnTopHint)
    screen = QGuiApplication.primaryScreen()
    if screen is not None:
        splash.move(screen.availableGeometry().center() - splash.rect().center())
    splash.show()
    QCoreApplication.processEvents()

    closed = False

    def close() -> None:
        nonlocal closed
        if closed:
            return
        closed = True
        splash.close()
        splash.deleteLater()

    return close
