"""
Video Application Layer.

Contains use cases and application services that orchestrate domain logic
and coordinate between domain and infrastructure layers.
"""

from .delivery_policy import DeliveryPolicy
from .streaming_service import StreamingService, DirectStream, TranscodeStream

__all__ = [
    "DeliveryPolicy",
    "StreamingService",
    "DirectStream",
    "TranscodeStream",
]
