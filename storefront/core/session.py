"""
Anonymous cart session handling

Visitors who are not logged in own a cart through an opaque session id.
The id travels in a cookie, or in a header for API clients that do not
keep cookies. One SessionService is built by the application factory and
handed to routes through get_session_service.
"""

from typing import Optional
import uuid

from fastapi import Request, Response

from .config import Settings

class SessionService:
    """Reads, issues and clears the anonymous session id"""

    def __init__(
        self,
        cookie_name: str,
        header_name: str,
        max_age: int,
        secure: bool = False,
    ):
        self.cookie_name = cookie_name
        self.header_name = header_name
        self.max_age = max_age
        self.secure = secure

    @classmethod
    def from_settings(cls, settings: Settings) -> "SessionService":
        return cls(
            cookie_name=settings.SESSION_COOKIE_NAME,
            header_name=settings.SESSION_HEADER_NAME,
            max_age=settings.SESSION_COOKIE_MAX_AGE,
            secure=settings.SESSION_COOKIE_SECURE,
        )

    def get_session_id(self, request: Request) -> Optional[str]:
        """Session id sent by the client, header first"""
        session_id = request.headers.get(self.header_name) or request.cookies.get(self.cookie_name)
        if session_id:
            session_id = session_id.strip()
        return session_id or None

    def ensure_session_id(self, request: Request, response: Response) -> str:
        """Return the client's session id, issuing a new one if it has none"""
        session_id = self.get_session_id(request)
        if session_id:
            return session_id

        session_id = str(uuid.uuid4())
        response.set_cookie(
            self.cookie_name,
            session_id,
            max_age=self.max_age,
            httponly=True,
            secure=self.secure,
            samesite="lax",
        )
        response.headers[self.header_name] = session_id
        return session_id

    def clear(self, response: Response) -> None:
        """Forget the anonymous session once its cart has been merged"""
        response.delete_cookie(self.cookie_name)

def get_session_service(request: Request) -> SessionService:
    return request.app.state.session_service
