"""
Credential Store

Maps usernames to registered accounts.

KNOWN WEAKNESS: Passwords are stored and compared in plaintext.
This mirrors the behaviour the application has always had; hashing
is intentionally not introduced here.
"""

from typing import Optional

from expense_manager.models.expense import UserAccount


class CredentialStore:
    """
    In-memory username -> account mapping.

    Accounts are created by register() and never modified or removed.
    """

    def __init__(self):
        self._users: dict[str, UserAccount] = {}

    def register(self, username: str, password: str) -> bool:
        """
        Register a new user.

        Returns False if the username is already taken; the existing
        account (and its password) is left untouched.
        """
        if username in self._users:
            return False
        self._users[username] = UserAccount(username=username, password=password)
        return True

    def authenticate(self, username: str, password: str) -> bool:
        """True iff the user exists and the password matches exactly."""
        user = self._users.get(username)
        return user is not None and user.password == password

    def get(self, username: str) -> Optional[UserAccount]:
        return self._users.get(username)

    def __contains__(self, username: object) -> bool:
        return username in self._users

    def __len__(self) -> int:
        return len(self._users)
