"""
Delivery Policy.

Decides whether a video can be sent to the browser as-is or must be transcoded.
"""

from ..domain.models import DeliveryMode, VideoRecord


class DeliveryPolicy:
    """Chooses the delivery mode from a record's codec label"""

    def __init__(self, native_codec: str = "h264"):
        if not native_codec or not native_codec.strip():
            raise ValueError("Native codec cannot be empty")
        self.native_codec = native_codec.strip().lower()

    def decide(self, record: VideoRecord) -> DeliveryMode:
        """DIRECT when the codec is unknown or natively playable, TRANSCODE otherwise"""
        codec = (record.codec or "").strip().lower()
        if not codec or codec == self.native_codec:
            return DeliveryMode.DIRECT
        return DeliveryMode.TRANSCODE
