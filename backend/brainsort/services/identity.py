"""
Identity Gateway

Wraps the identity provider (users and sessions collections) behind
login / signup / logout and a current-user stream.

One gateway represents one client session. Its state starts unresolved;
``restore()`` (from a token), ``login()`` or ``signup()`` resolve it and
every later change is pushed through ``stream``.
"""
from datetime import datetime
from typing import Callable, List, Optional
import logging

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import DuplicateKeyError, PyMongoError

from ..config import settings
from ..exceptions import AuthError, AuthErrorKind
from ..models import User, Session
from .auth import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
    validate_email,
)

logger = logging.getLogger(__name__)

UserCallback = Callable[[Optional[User]], None]


class CurrentUserStream:
    """
    Observable holding the last-seen identity.

    A subscriber is called once with the resolved state as soon as it is
    resolved (right away if it already is), then on every change.
    """

    def __init__(self):
        self._subscribers: List[UserCallback] = []
        self._resolved = False
        self._current: Optional[User] = None

    @property
    def current(self) -> Optional[User]:
        return self._current

    @property
    def resolved(self) -> bool:
        return self._resolved

    def subscribe(self, callback: UserCallback) -> Callable[[], None]:
        """Register a callback; returns the unsubscribe handle"""
        self._subscribers.append(callback)
        if self._resolved:
            callback(self._current)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def emit(self, user: Optional[User]):
        self._current = user
        self._resolved = True
        for callback in list(self._subscribers):
            callback(user)


def _unavailable(action: str, error: Exception) -> AuthError:
    logger.error(f"Identity provider error during {action}: {error}")
    return AuthError(
        AuthErrorKind.OTHER,
        f"Identity provider unavailable during {action}: {error}",
        status_code=503,
    )


class IdentityGateway:
    """Email/password identity provider backed by MongoDB"""

    def __init__(
        self,
        users: AsyncIOMotorCollection,
        sessions: AsyncIOMotorCollection,
        stream: Optional[CurrentUserStream] = None,
    ):
        self.users = users
        self.sessions = sessions
        self.stream = stream or CurrentUserStream()
        self.token: Optional[str] = None
        self._session_id: Optional[str] = None

    @property
    def current_user(self) -> Optional[User]:
        return self.stream.current

    async def restore(self, token: Optional[str]) -> Optional[User]:
        """
        Resolve the initial state from a session token.

        Missing, invalid, expired or revoked tokens resolve to None.
        """
        user = None
        payload = decode_access_token(token) if token else None
        user_id = payload.get("sub") if payload else None
        session_id = payload.get("sid") if payload else None

        if user_id and session_id:
            try:
                session = await self.sessions.find_one({"id": session_id, "user_id": user_id})
                user_data = await self.users.find_one({"id": user_id}) if session else None
            except PyMongoError as e:
                raise _unavailable("restore", e)
            if user_data:
                user = User(**user_data)

        self._session_id = session_id if user else None
        self.token = token if user else None
        self.stream.emit(user)
        return user

    async def signup(self, email: str, password: str) -> User:
        """Create an account and sign it in"""
        email = email.strip().lower()
        if not validate_email(email):
            raise AuthError(AuthErrorKind.OTHER, "Invalid email format", user_message="Invalid email format.")
        if len(password) < settings.password_min_length:
            raise AuthError(
                AuthErrorKind.OTHER,
                "Password too short",
                user_message=f"Password must be at least {settings.password_min_length} characters.",
            )

        try:
            existing = await self.users.find_one({"email": email})
            if existing:
                raise AuthError(AuthErrorKind.EMAIL_ALREADY_IN_USE, f"Email already registered: {email}")

            user = User(email=email, password_hash=hash_password(password))
            await self.users.insert_one(user.model_dump())
        except DuplicateKeyError:
            raise AuthError(AuthErrorKind.EMAIL_ALREADY_IN_USE, f"Email already registered: {email}")
        except PyMongoError as e:
            raise _unavailable("signup", e)

        logger.info(f"New user registered: {user.id}")
        return await self._start_session(user)

    async def login(self, email: str, password: str) -> User:
        email = email.strip().lower()
        try:
            user_data = await self.users.find_one({"email": email})
        except PyMongoError as e:
            raise _unavailable("login", e)

        if not user_data or not user_data.get("password_hash"):
            raise AuthError(AuthErrorKind.INVALID_CREDENTIAL, f"Unknown email: {email}")
        if not verify_password(password, user_data["password_hash"]):
            raise AuthError(AuthErrorKind.INVALID_CREDENTIAL, f"Wrong password for: {email}")

        user = User(**user_data)
        user.last_login = datetime.utcnow()
        try:
            await self.users.update_one(
                {"id": user.id},
                {"$set": {"last_login": user.last_login}}
            )
        except PyMongoError as e:
            raise _unavailable("login", e)

        return await self._start_session(user)

    async def logout(self):
        """End the provider session; the token stops resolving"""
        if self._session_id:
            try:
                await self.sessions.delete_one({"id": self._session_id})
            except PyMongoError as e:
                raise _unavailable("logout", e)
            logger.info(f"Session ended: {self._session_id}")

        self._session_id = None
        self.token = None
        self.stream.emit(None)

    async def _start_session(self, user: User) -> User:
        session = Session(user_id=user.id)
        try:
            await self.sessions.insert_one(session.model_dump())
        except PyMongoError as e:
            raise _unavailable("session start", e)

        self._session_id = session.id
        self.token = create_access_token(user.id, user.email, session.id)
        self.stream.emit(user)
        return user
