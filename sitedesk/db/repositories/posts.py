from typing import List

from sqlalchemy import select

from sitedesk.db.models import Post
from sitedesk.db.repositories.base import Repository


class PostsRepository(Repository):
    def list_for_app(self, app_id: str, published: bool) -> List[Post]:
        stmt = (
            select(Post)
            .where(Post.app_id == app_id, Post.published == published)
            .order_by(Post.created_at.desc())
        )
        return list(self.session.scalars(stmt).all())
