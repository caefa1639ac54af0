"""Manager for BlogPost: CRUD and paginated listing using a DB session."""

from sqlalchemy.orm import Session

from styleguide.models import BlogPost


class BlogManager:
    """Provides access to blog posts. Takes a DB session as input."""

    def __init__(self, session: Session):
        self._session = session

    def get_by_slug(self, slug: str) -> BlogPost | None:
        return self._session.query(BlogPost).filter(BlogPost.slug == slug).first()

    def slug_exists(self, slug: str) -> bool:
        return self.get_by_slug(slug) is not None

    def add(self, post: BlogPost) -> BlogPost:
        self._session.add(post)
        self._session.flush()
        return post

    def delete(self, post: BlogPost) -> None:
        self._session.delete(post)
        self._session.flush()

    def list_page(
        self,
        *,
        page: int,
        limit: int,
        category: str | None = None,
        published: bool | None = True,
    ) -> tuple[list[BlogPost], int]:
        """Return (posts, total) for one page, newest first."""
        query = self._session.query(BlogPost)
        if category:
            query = query.filter(BlogPost.category == category)
        if published is not None:
            query = query.filter(BlogPost.is_published == published)
        total = query.count()
        posts = (
            query.order_by(BlogPost.published_at.desc(), BlogPost.created_at.desc(), BlogPost.post_id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return posts, total
