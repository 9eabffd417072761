# app/repositories/user_repo.py
from sqlmodel import Session, select

from app.models.user import User


class UserRepository:
    """
    Account lookups for registration and login.

    Emails are stored lowercased, so lookups normalise the same way.
    Token resolution reads users straight through session.get (see
    app.core.auth).
    """

    def find_by_email(self, session: Session, email: str) -> User | None:
        stmt = select(User).where(User.email == email.strip().lower())
        return session.exec(stmt).first()

    def username_taken(self, session: Session, username: str) -> bool:
        stmt = select(User.id).where(User.username == username)
        return session.exec(stmt).first() is not None

    def save(self, session: Session, user: User) -> User:
        """Insert or update, then reload server-side defaults."""
        session.add(user)
        session.commit()
        session.refresh(user)
        return user
