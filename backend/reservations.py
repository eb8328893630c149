from __future__ import annotations

import logging
from typing import List

from device_registry import Device, DeviceRegistry
from errors import ErrorKind, Failure, Result
from users import User, UserDirectory

logger = logging.getLogger(__name__)


class ReservationWorkflow:
    """Take and release devices on behalf of registered users.

    A device is either available (``taken_by`` is ``None``) or reserved by
    exactly one login. Credentials are checked through the user directory
    before the registry is touched.
    """

    def __init__(self, registry: DeviceRegistry, directory: UserDirectory) -> None:
        self._registry = registry
        self._directory = directory

    def _authenticate(self, login: str, password: str) -> Result[User]:
        user = self._directory.find(login)
        if isinstance(user, Failure):
            return user
        if not self._directory.verify(user, password):
            return Failure(ErrorKind.UNAUTHORIZED, "Wrong password")
        return user

    def take(self, device_id: int, login: str, password: str) -> Result[Device]:
        device = self._registry.get(device_id)
        if isinstance(device, Failure):
            return device
        user = self._authenticate(login, password)
        if isinstance(user, Failure):
            return user

        result = self._registry.reserve(device_id, user.login)
        if not isinstance(result, Failure):
            logger.info("Device %s taken by %s", device_id, user.login)
        return result

    def release(self, device_id: int, login: str, password: str) -> Result[Device]:
        """Return a device; only its holder or an admin may do so."""
        device = self._registry.get(device_id)
        if isinstance(device, Failure):
            return device
        user = self._authenticate(login, password)
        if isinstance(user, Failure):
            return user

        holder = None if user.is_admin else user.login
        result = self._registry.release(device_id, holder=holder)
        if not isinstance(result, Failure):
            logger.info("Device %s released by %s", device_id, user.login)
        return result

    def taken_devices(self, login: str) -> List[Device]:
        return self._registry.find_by_owner(login)
