"""Batch scheduling module for deferred queue flushes."""

from .batch_scheduler import BatchScheduler, TimerFactory

__all__ = ["BatchScheduler", "TimerFactory"]
