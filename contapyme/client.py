"""
Thin HTTP client for the session endpoints.

``AuthSimple`` is what scripts and other services use to log in against a
running instance; it keeps the session cookies in its ``httpx.Client``.
"""

import logging
from typing import Callable, Dict, Optional, Union

import httpx

logger = logging.getLogger(__name__)

AUTH_ERROR = "Error de autenticación"
CONNECTION_ERROR = "Error de conexión"
SESSION_ERROR = "Error verificando sesión"


class AuthSimple:
    def __init__(self, base_url_or_client: Union[str, httpx.Client] = "http://localhost:8000", timeout: float = 10.0):
        if isinstance(base_url_or_client, httpx.Client):
            self.client = base_url_or_client
        else:
            self.client = httpx.Client(base_url=base_url_or_client, timeout=timeout)

    def login(self, email: str, password: str) -> Dict:
        """Returns ``{"user": ...}`` on success, ``{"error": message}`` otherwise."""
        try:
            response = self.client.post("/api/auth/login", json={"email": email, "password": password})
        except httpx.HTTPError as e:
            logger.error("Login request failed: %s", e)
            return {"error": CONNECTION_ERROR}

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.status_code != 200 or not body.get("success"):
            return {"error": body.get("error") or AUTH_ERROR}
        return {"user": body.get("user")}

    def logout(self) -> None:
        try:
            self.client.delete("/api/auth/session")
        except httpx.HTTPError as e:
            logger.warning("Logout request failed: %s", e)

    def get_session(self) -> Dict:
        try:
            response = self.client.get("/api/auth/session")
            response.raise_for_status()
            return {"user": response.json().get("user")}
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Session check failed: %s", e)
            return {"error": SESSION_ERROR}

    def on_ready(self, callback: Callable[[str], None]) -> Optional[str]:
        """
        Send the readiness signal and hand any pending redirect to ``callback``.

        Returns the redirect target, or None when nothing was pending.
        """
        try:
            response = self.client.post("/api/auth/redirect/ready")
            response.raise_for_status()
            target = response.json().get("redirect")
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Readiness signal failed: %s", e)
            return None

        if target:
            callback(target)
        return target

    def close(self):
        self.client.close()
