from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from code_binder import DEFAULT_CODE_OPTIONS, CodeOptions, render_code
from config import load_settings
from device_registry import Device, DeviceRegistry
from errors import ErrorKind, Failure, Result, parse_device_id, require_string
from images import ImageStore
from reservations import ReservationWorkflow
from users import Role, UserDirectory, create_user_directory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegisteredDevice:
    device: Device
    code: bytes


def _first_failure(*values: Any) -> Optional[Failure]:
    for value in values:
        if isinstance(value, Failure):
            return value
    return None


class DeviceService:
    """Entry point for every device and user operation.

    Identifiers may be passed as text; they are parsed to ``int`` here and a
    malformed one is reported as ``INVALID_INPUT`` instead of never matching.
    """

    def __init__(
        self,
        registry: DeviceRegistry,
        directory: UserDirectory,
        code_options: CodeOptions = DEFAULT_CODE_OPTIONS,
    ) -> None:
        self.registry = registry
        self.directory = directory
        self.images = ImageStore(registry)
        self.reservations = ReservationWorkflow(registry, directory)
        self.code_options = code_options

    def _device_fields(self, name: Any, description: Any, serial_number: Any, manufacturer: Any) -> Result[tuple]:
        fields = (
            require_string(name, "name"),
            require_string(description, "description"),
            require_string(serial_number, "serialNumber"),
            require_string(manufacturer, "manufacturer"),
        )
        return _first_failure(*fields) or fields

    def register_device(self, name: Any, description: Any, serial_number: Any, manufacturer: Any) -> Result[RegisteredDevice]:
        fields = self._device_fields(name, description, serial_number, manufacturer)
        if isinstance(fields, Failure):
            return fields
        previous_id = self.registry.last_registered_id
        device = self.registry.register(*fields)
        if isinstance(device, Failure):
            return device
        try:
            code = render_code(device.id, self.code_options)
        except Exception:
            logger.exception("Rendering the code for device %s failed, discarding it", device.id)
            self.registry.discard(device.id, previous_id)
            raise
        return RegisteredDevice(device=device, code=code)

    def list_devices(self) -> List[str]:
        return self.registry.list_names()

    def get_device(self, raw_id: Any) -> Result[Device]:
        device_id = parse_device_id(raw_id)
        if isinstance(device_id, Failure):
            return device_id
        return self.registry.get(device_id)

    def update_device(
        self, raw_id: Any, name: Any, description: Any, serial_number: Any, manufacturer: Any
    ) -> Result[Device]:
        device_id = parse_device_id(raw_id)
        if isinstance(device_id, Failure):
            return device_id
        fields = self._device_fields(name, description, serial_number, manufacturer)
        if isinstance(fields, Failure):
            return fields
        return self.registry.update(device_id, *fields)

    def delete_device(self, raw_id: Any) -> Result[None]:
        device_id = parse_device_id(raw_id)
        if isinstance(device_id, Failure):
            return device_id
        return self.registry.delete(device_id)

    def register_user(self, login: Any, password: Any) -> Result[None]:
        login = require_string(login, "login")
        failure = _first_failure(login, require_string(password, "password"))
        if failure:
            return failure
        user = self.directory.register(login, password, role=Role.MEMBER)
        if isinstance(user, Failure):
            return user
        return None

    def attach_image(self, raw_id: Any, content: bytes, media_kind: Optional[str]) -> Result[None]:
        device_id = parse_device_id(raw_id)
        if isinstance(device_id, Failure):
            return device_id
        return self.images.attach(device_id, content, media_kind)

    def view_image(self, raw_id: Any) -> Result[bytes]:
        device_id = parse_device_id(raw_id)
        if isinstance(device_id, Failure):
            return device_id
        return self.images.retrieve(device_id)

    def take_device(self, raw_id: Any, login: Any, password: Any) -> Result[Device]:
        device_id = parse_device_id(raw_id)
        failure = _first_failure(device_id, require_string(login, "login"), require_string(password, "password"))
        if failure:
            return failure
        return self.reservations.take(device_id, login, password)

    def release_device(self, raw_id: Any, login: Any, password: Any) -> Result[Device]:
        device_id = parse_device_id(raw_id)
        failure = _first_failure(device_id, require_string(login, "login"), require_string(password, "password"))
        if failure:
            return failure
        return self.reservations.release(device_id, login, password)

    def taken_devices(self, login: str) -> List[Device]:
        return self.reservations.taken_devices(login)

    def render_code(self, identifier: Any) -> bytes:
        """Render the tag for ``identifier``; the device does not have to exist."""
        return render_code(identifier, self.code_options)

    def render_last_registered_code(self) -> Result[bytes]:
        last_id = self.registry.last_registered_id
        if last_id is None:
            return Failure(ErrorKind.NOT_FOUND, "No device has been registered yet")
        return render_code(last_id, self.code_options)


_SERVICE: Optional[DeviceService] = None


def get_service() -> DeviceService:
    global _SERVICE  # noqa: PLW0603
    if _SERVICE is None:
        _SERVICE = reset_service()
    return _SERVICE


def reset_service() -> DeviceService:
    """Build a fresh service over empty collections."""
    global _SERVICE  # noqa: PLW0603
    settings = load_settings()
    _SERVICE = DeviceService(
        registry=DeviceRegistry(unique_names_on_update=settings.unique_names_on_update),
        directory=create_user_directory(),
    )
    return _SERVICE
