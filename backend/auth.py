from __future__ import annotations

from typing import Tuple

from flask import Request

from errors import APIError


def extract_credentials(request: Request) -> Tuple[str, str]:
    """Return ``(login, password)`` from form fields, falling back to HTTP Basic auth."""
    login = request.form.get("login")
    password = request.form.get("password")
    if not login and not password and request.authorization is not None:
        login = request.authorization.username
        password = request.authorization.password
    if not login or not password:
        raise APIError("login and password are required", 401)
    return login, password
