from __future__ import annotations
import logging
from typing import Callable

from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal

from .errors import FloorPlanError

logger = logging.getLogger(__name__)


class TaskSignals(QObject):
    finished = Signal(object)
    failed = Signal(str)


class Task(QRunnable):
    """Runs a gateway call off the UI thread; results come back as signals."""

    def __init__(self, fn: Callable, *args):
        super().__init__()
        self.fn = fn
        self.args = args
        self.signals = TaskSignals()

    def run(self):
        try:
            result = self.fn(*self.args)
        except FloorPlanError as e:
            self.signals.failed.emit(str(e))
            return
        except Exception as e:
            logger.exception("Background task failed")
            self.signals.failed.emit(str(e))
            return
        self.signals.finished.emit(result)


def run_task(fn: Callable, *args, on_done=None, on_error=None) -> Task:
    task = Task(fn, *args)
    if on_done:
        task.signals.finished.connect(on_done)
    if on_error:
        task.signals.failed.connect(on_error)
    QThreadPool.globalInstance().start(task)
    return task
