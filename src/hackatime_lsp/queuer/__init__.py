"""Heartbeat queue module."""

from .heartbeat_queue import HeartbeatQueue, QueueConfig, spawn_thread

__all__ = ["HeartbeatQueue", "QueueConfig", "spawn_thread"]
