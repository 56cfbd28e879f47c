from typing import Optional

from sqlalchemy import select

from sitedesk.db.models import User
from sitedesk.db.repositories.base import Repository


class UsersRepository(Repository):
    def get(self, user_id: str) -> Optional[User]:
        return self.session.scalars(select(User).where(User.id == user_id)).first()

    def get_or_create(self, user_id: str, name: Optional[str] = None, email: Optional[str] = None) -> User:
        user = self.get(user_id)
        if user:
            return user
        return self.save(User(id=user_id, name=name, email=email))
