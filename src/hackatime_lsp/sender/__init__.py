"""Heartbeat delivery module."""

from .cli_sender import CLISender, DeliveryResponse, DeliveryStatus, SenderConfig, build_heartbeat_args, quote_arg
from .delivery_worker import DeliveryWorker

__all__ = [
    "CLISender",
    "DeliveryResponse",
    "DeliveryStatus",
    "DeliveryWorker",
    "SenderConfig",
    "build_heartbeat_args",
    "quote_arg",
]
