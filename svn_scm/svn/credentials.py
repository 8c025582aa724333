from __future__ import annotations

import keyring
from keyring.errors import KeyringError, PasswordDeleteError


class SvnCredentialError(RuntimeError):
    """Raised when credentials cannot be written to or removed from the keyring."""


class SvnCredentialStore:
    """Per-working-copy username/password pairs in the OS keyring."""

    def __init__(self, *, service_name: str = "svn-scm") -> None:
        self._service_name = str(service_name)

    def set(self, root: str, username: str, password: str) -> None:
        user = str(username or "").strip()
        if not user:
            raise SvnCredentialError("Username is required.")
        try:
            keyring.set_password(self._service_name, self._account(root, "username"), user)
            keyring.set_password(self._service_name, self._account(root, "password"), str(password or ""))
        except KeyringError as exc:
            raise SvnCredentialError(f"Could not store credentials: {exc}") from exc

    def get(self, root: str) -> tuple[str, str] | None:
        try:
            username = keyring.get_password(self._service_name, self._account(root, "username"))
            password = keyring.get_password(self._service_name, self._account(root, "password"))
        except KeyringError:
            return None
        user = str(username or "").strip()
        if not user:
            return None
        return user, str(password or "")

    def clear(self, root: str) -> None:
        for field_name in ("username", "password"):
            try:
                keyring.delete_password(self._service_name, self._account(root, field_name))
            except PasswordDeleteError:
                continue
            except KeyringError as exc:
                raise SvnCredentialError(f"Could not remove credentials: {exc}") from exc

    def has_credentials(self, root: str) -> bool:
        return self.get(root) is not None

    @staticmethod
    def _account(root: str, field_name: str) -> str:
        return f"{root}:{field_name}"
