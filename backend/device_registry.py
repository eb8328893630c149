from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from errors import ErrorKind, Failure, Result
from identity import IdentityAllocator

logger = logging.getLogger(__name__)


@dataclass
class Device:
    id: int
    name: str
    description: str
    serial_number: str
    manufacturer: str
    image: Optional[str] = None
    taken_by: Optional[str] = None

    @property
    def available(self) -> bool:
        return self.taken_by is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "serialNumber": self.serial_number,
            "manufacturer": self.manufacturer,
            "takenBy": self.taken_by,
            "hasImage": self.image is not None,
        }


def _not_found(device_id: int) -> Failure:
    return Failure(ErrorKind.NOT_FOUND, f"Device {device_id} not found")


class DeviceRegistry:
    """Owns every device record.

    All reads and writes go through this class; each mutation runs under one
    lock so the check-then-act steps (name uniqueness, reservation) cannot
    interleave.
    """

    def __init__(
        self,
        allocator: Optional[IdentityAllocator] = None,
        unique_names_on_update: bool = False,
    ) -> None:
        self._devices: Dict[int, Device] = {}
        self._allocator = allocator or IdentityAllocator()
        self._lock = threading.RLock()
        self.unique_names_on_update = unique_names_on_update
        self.last_registered_id: Optional[int] = None

    def _name_taken(self, name: str, exclude_id: Optional[int] = None) -> bool:
        return any(device.name == name and device.id != exclude_id for device in self._devices.values())

    def register(self, name: str, description: str, serial_number: str, manufacturer: str) -> Result[Device]:
        with self._lock:
            if self._name_taken(name):
                return Failure(ErrorKind.CONFLICT, f"Device '{name}' already exists")
            device = Device(
                id=self._allocator.next(),
                name=name,
                description=description,
                serial_number=serial_number,
                manufacturer=manufacturer,
            )
            self._devices[device.id] = device
            self.last_registered_id = device.id
        logger.info("Registered device %s (%s)", device.id, device.name)
        return device

    def list_names(self) -> List[str]:
        with self._lock:
            return [device.name for device in self._devices.values()]

    def get(self, device_id: int) -> Result[Device]:
        with self._lock:
            device = self._devices.get(device_id)
        if device is None:
            return _not_found(device_id)
        return device

    def update(
        self,
        device_id: int,
        name: str,
        description: str,
        serial_number: str,
        manufacturer: str,
    ) -> Result[Device]:
        with self._lock:
            device = self._devices.get(device_id)
            if device is None:
                return _not_found(device_id)
            if self.unique_names_on_update and self._name_taken(name, exclude_id=device_id):
                return Failure(ErrorKind.CONFLICT, f"Device '{name}' already exists")
            device.name = name
            device.description = description
            device.serial_number = serial_number
            device.manufacturer = manufacturer
            return device

    def delete(self, device_id: int) -> Result[None]:
        with self._lock:
            device = self._devices.pop(device_id, None)
        if device is None:
            return _not_found(device_id)
        logger.info("Deleted device %s (%s)", device.id, device.name)
        return None

    def discard(self, device_id: int, last_registered_id: Optional[int]) -> None:
        """Undo a registration: drop the record and restore ``last_registered_id``."""
        with self._lock:
            self._devices.pop(device_id, None)
            if self.last_registered_id == device_id:
                self.last_registered_id = last_registered_id

    def find_by_owner(self, login: str) -> List[Device]:
        with self._lock:
            return [device for device in self._devices.values() if device.taken_by == login]

    def reserve(self, device_id: int, login: str) -> Result[Device]:
        with self._lock:
            device = self._devices.get(device_id)
            if device is None:
                return _not_found(device_id)
            if device.taken_by is not None:
                return Failure(ErrorKind.CONFLICT, f"Device {device_id} is already taken")
            device.taken_by = login
            return device

    def release(self, device_id: int, holder: Optional[str] = None) -> Result[Device]:
        """Clear ``taken_by``; when ``holder`` is given it must match the current one."""
        with self._lock:
            device = self._devices.get(device_id)
            if device is None:
                return _not_found(device_id)
            if device.taken_by is None:
                return Failure(ErrorKind.CONFLICT, f"Device {device_id} is not taken")
            if holder is not None and device.taken_by != holder:
                return Failure(ErrorKind.CONFLICT, f"Device {device_id} is taken by another user")
            device.taken_by = None
            return device

    def set_image(self, device_id: int, encoded: str) -> Result[Device]:
        with self._lock:
            device = self._devices.get(device_id)
            if device is None:
                return _not_found(device_id)
            device.image = encoded
            return device

