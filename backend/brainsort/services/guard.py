"""
Route Guard
Blocks protected content until the identity stream resolves to a user.
"""
from enum import Enum
from typing import Callable, Optional
import logging

from ..models import User
from .identity import CurrentUserStream

logger = logging.getLogger(__name__)


class GuardState(str, Enum):
    CHECKING = "checking"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


class RouteGuard:
    """
    Mounted over a current-user stream.

    Starts in ``checking`` and follows every stream event: a user moves it to
    ``authenticated``, none moves it to ``unauthenticated`` and fires the
    redirect callback.
    """

    def __init__(
        self,
        stream: CurrentUserStream,
        login_path: str = "/auth",
        on_redirect: Optional[Callable[[str], None]] = None,
    ):
        self.state = GuardState.CHECKING
        self.user: Optional[User] = None
        self.login_path = login_path
        self.redirect_to: Optional[str] = None
        self._on_redirect = on_redirect
        self._unsubscribe = stream.subscribe(self._on_identity)

    def _on_identity(self, user: Optional[User]):
        self.user = user
        if user is not None:
            self.state = GuardState.AUTHENTICATED
            self.redirect_to = None
            return

        self.state = GuardState.UNAUTHENTICATED
        self.redirect_to = self.login_path
        logger.debug(f"Unauthenticated, redirecting to {self.login_path}")
        if self._on_redirect:
            self._on_redirect(self.login_path)

    @property
    def can_render(self) -> bool:
        return self.state == GuardState.AUTHENTICATED

    def unmount(self):
        self._unsubscribe()
