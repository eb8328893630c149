from __future__ import annotations

import base64
import logging
from typing import Optional

from device_registry import DeviceRegistry
from errors import ErrorKind, Failure, Result

logger = logging.getLogger(__name__)


def is_image_kind(media_kind: Optional[str]) -> bool:
    if not media_kind:
        return False
    main_type = media_kind.split(";", 1)[0].strip().lower().split("/", 1)[0]
    return main_type == "image"


class ImageStore:
    """Attaches photos to device records as base64 text."""

    def __init__(self, registry: DeviceRegistry) -> None:
        self._registry = registry

    def attach(self, device_id: int, raw: bytes, media_kind: Optional[str]) -> Result[None]:
        if not is_image_kind(media_kind):
            return Failure(ErrorKind.INVALID_MEDIA, f"Invalid file format: {media_kind or 'unknown'}")

        encoded = base64.b64encode(raw).decode("ascii")
        result = self._registry.set_image(device_id, encoded)
        if isinstance(result, Failure):
            return result
        logger.info("Stored %d byte image for device %s", len(raw), device_id)
        return None

    def retrieve(self, device_id: int) -> Result[bytes]:
        device = self._registry.get(device_id)
        if isinstance(device, Failure):
            return device
        if device.image is None:
            return Failure(ErrorKind.IMAGE_NOT_SET, f"Device {device_id} has no image")
        return base64.b64decode(device.image)
