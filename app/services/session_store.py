import logging
import secrets
from collections.abc import Callable
from datetime import datetime
from datetime import timezone

from pydantic import ValidationError

from app.core.exceptions import DuplicateAccountError
from app.core.exceptions import InvalidCredentialsError
from app.models.session_models import Account
from app.models.session_models import Session
from app.services.storage.kv_store import ACCOUNTS_KEY
from app.services.storage.kv_store import SESSION_KEY
from app.services.storage.kv_store import TOKEN_KEY
from app.services.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_token() -> str:
    return f"simulated_jwt_{secrets.token_urlsafe(24)}"


class SessionStore:
    """Simulated account registry and single persisted session.

    Passwords are stored and compared in plaintext. At most one session is
    persisted at a time: register and login both replace it.
    """

    def __init__(
        self,
        store: KeyValueStore,
        clock: Callable[[], datetime] = _utcnow,
        token_factory: Callable[[], str] = _new_token,
    ):
        self.store = store
        self.clock = clock
        self.token_factory = token_factory

    def _accounts(self) -> list[Account]:
        accounts: list[Account] = []
        for raw in self.store.get_item(ACCOUNTS_KEY, []):
            try:
                accounts.append(Account.model_validate(raw))
            except ValidationError as e:
                logger.warning("Skipping malformed account entry: %s", e)
        return accounts

    def _new_account_id(self, existing: list[Account]) -> str:
        # Time-based like the rest of the store, bumped on collision
        candidate = int(self.clock().timestamp() * 1000)
        taken = {a.id for a in existing}
        while str(candidate) in taken:
            candidate += 1
        return str(candidate)

    def _persist_session(self, session: Session) -> str:
        token = self.token_factory()
        self.store.set_item(SESSION_KEY, session.to_storage())
        self.store.set_item(TOKEN_KEY, token)
        return token

    def register(self, email: str, password: str, name: str, institution: str = "") -> tuple[Session, str]:
        """Create an account and open a session for it.

        Returns:
            The session projection (no password) and its opaque token.

        Raises:
            DuplicateAccountError: If an account already uses *email*.
        """
        accounts = self._accounts()
        if any(a.email == email for a in accounts):
            logger.info("Registration refused, email already in use: %s", email)
            raise DuplicateAccountError()

        account = Account(
            id=self._new_account_id(accounts),
            email=email,
            name=name,
            institution=institution,
            created_at=self.clock(),
            password=password,
        )
        self.store.set_item(ACCOUNTS_KEY, [a.to_storage() for a in accounts] + [account.to_storage()])

        session = account.to_session()
        token = self._persist_session(session)
        logger.info("Registered account %s (%s)", session.id, email)
        return session, token

    def login(self, email: str, password: str) -> tuple[Session, str]:
        """Open a session for the account matching both *email* and *password* exactly.

        Raises:
            InvalidCredentialsError: If no account matches.
        """
        account = next((a for a in self._accounts() if a.email == email and a.password == password), None)
        if account is None:
            logger.info("Login failed for %s", email)
            raise InvalidCredentialsError()

        session = account.to_session()
        token = self._persist_session(session)
        logger.info("Account %s logged in", session.id)
        return session, token

    def logout(self) -> None:
        self.store.remove_item(SESSION_KEY)
        self.store.remove_item(TOKEN_KEY)
        logger.info("Session cleared")

    def current_session(self) -> Session | None:
        """Return the persisted session, discarding it if it cannot be parsed. Never raises."""
        raw = self.store.get_item(SESSION_KEY)
        token = self.store.get_item(TOKEN_KEY)
        if raw is None or token is None:
            return None
        try:
            return Session.model_validate(raw)
        except ValidationError as e:
            logger.error("Failed to parse stored session data, discarding it: %s", e)
            self.logout()
            return None

    def current_token(self) -> str | None:
        token = self.store.get_item(TOKEN_KEY)
        return token if isinstance(token, str) else None
