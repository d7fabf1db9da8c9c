"""Removal pipeline: worklist, processing loop and progress reporting."""

from .loop import LoopPolicy, ProcessingLoop
from .queue import ItemQueue
from .reporter import EventSink, ProgressReporter, format_countdown

__all__ = [
    "ItemQueue",
    "LoopPolicy",
    "ProcessingLoop",
    "EventSink",
    "ProgressReporter",
    "format_countdown",
]
