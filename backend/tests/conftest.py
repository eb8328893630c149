from pathlib import Path
import sys

import pytest

backend_root = Path(__file__).resolve().parents[1]
if str(backend_root) not in sys.path:
    sys.path.insert(0, str(backend_root))


@pytest.fixture()
def registry():
    from device_registry import DeviceRegistry

    return DeviceRegistry()


@pytest.fixture()
def directory(monkeypatch):
    monkeypatch.delenv("ADMIN_LOGIN", raising=False)
    monkeypatch.delenv("ADMIN_PASSWORD", raising=False)
    from users import UserDirectory

    return UserDirectory()


@pytest.fixture()
def service(monkeypatch):
    monkeypatch.setenv("ADMIN_LOGIN", "admin")
    monkeypatch.setenv("ADMIN_PASSWORD", "admin-pw")
    monkeypatch.delenv("UNIQUE_DEVICE_NAMES_ON_UPDATE", raising=False)
    import service as service_module

    return service_module.reset_service()
