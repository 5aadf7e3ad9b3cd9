from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, insert, update, and_, or_, exists, func, literal
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
import logging
import re

from blog_api.models.post import Post
from blog_api.models.user import User
from blog_api.models.category import Category
from blog_api.models.like import PostLike
from blog_api.schemas.post_schema import (
    PostCreate,
    PostUpdate,
    PostWithAuthor,
    PostLikeResponse,
    CategoryCreate
)
from blog_api.schemas.user_schema import SessionContext
from blog_api.exceptions import AuthenticationError, ValidationError, StoreError

logger = logging.getLogger(__name__)

def slugify(text: str) -> str:
    """Lowercase, drop punctuation, join words with dashes"""
    slug = re.sub(r"[^\w\s-]", "", text.lower())
    return re.sub(r"\s+", "-", slug.strip())

class PostService:
    def __init__(self, db: AsyncSession):
        self.db = db

    def _listing_query(self, viewer_id: Optional[str]):
        if viewer_id:
            user_liked = exists().where(
                and_(PostLike.post_id == Post.id, PostLike.user_id == viewer_id)
            )
        else:
            user_liked = literal(False)

        return select(
            Post,
            User.full_name,
            User.email,
            User.avatar_url,
            Category.name.label("category_name"),
            Category.slug.label("category_slug"),
            user_liked.label("user_liked")
        ).join(
            User, Post.author_id == User.id
        ).outerjoin(
            Category, Post.category_id == Category.id
        ).execution_options(populate_existing=True)

    def _to_response(self, row) -> PostWithAuthor:
        post = row.Post
        category = None
        if row.category_slug is not None:
            category = {"name": row.category_name, "slug": row.category_slug}

        return PostWithAuthor(
            id=post.id,
            title=post.title,
            content=post.content,
            excerpt=post.excerpt,
            category_id=post.category_id,
            tags=post.tags or [],
            published=post.published,
            author_id=post.author_id,
            slug=post.slug,
            like_count=post.like_count,
            created_at=post.created_at,
            updated_at=post.updated_at,
            author={
                "id": post.author_id,
                "full_name": row.full_name,
                "email": row.email,
                "avatar_url": row.avatar_url,
            },
            category=category,
            user_liked=bool(row.user_liked)
        )

    async def _commit(self, action: str) -> None:
        try:
            await self.db.commit()
        except IntegrityError as e:
            logger.error(f"Error {action}: {e}")
            await self.db.rollback()
            raise StoreError(f"Conflict while {action}", "conflict")
        except SQLAlchemyError as e:
            logger.error(f"Error {action}: {e}")
            await self.db.rollback()
            raise StoreError(f"Store failure while {action}")

    async def list_posts(
        self,
        ctx: SessionContext,
        search: Optional[str] = None,
        category_slug: Optional[str] = None,
        skip: int = 0,
        limit: int = 20
    ) -> List[PostWithAuthor]:
        """Published posts, newest first, optionally filtered"""
        stmt = self._listing_query(ctx.user_id).where(Post.published.is_(True))

        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(or_(Post.title.ilike(pattern), Post.content.ilike(pattern)))

        if category_slug:
            stmt = stmt.where(Category.slug == category_slug)

        stmt = stmt.order_by(Post.created_at.desc()).offset(skip).limit(limit)

        result = await self.db.execute(stmt)
        return [self._to_response(row) for row in result.all()]

    async def get_post(self, post_id: str) -> Optional[Post]:
        stmt = select(Post).where(Post.id == post_id).execution_options(populate_existing=True)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def _require_owned_post(self, ctx: SessionContext, post_id: str) -> Post:
        if not ctx.is_authenticated:
            raise AuthenticationError()

        post = await self.get_post(post_id)
        if post is None:
            raise StoreError("Post not found", "not_found")
        if post.author_id != ctx.user_id:
            raise StoreError("You can only change your own posts", "forbidden")
        return post

    async def get_post_by_slug(self, ctx: SessionContext, slug: str) -> PostWithAuthor:
        """A published post, or one of the caller's drafts"""
        visible = Post.published.is_(True)
        if ctx.user_id:
            visible = or_(visible, Post.author_id == ctx.user_id)

        stmt = self._listing_query(ctx.user_id).where(and_(Post.slug == slug, visible))
        result = await self.db.execute(stmt)
        row = result.first()

        if row is None:
            raise StoreError("Post not found", "not_found")
        return self._to_response(row)

    async def _check_category(self, category_id: Optional[str]) -> None:
        if category_id is None:
            return
        found = await self.db.scalar(select(Category.id).where(Category.id == category_id))
        if found is None:
            raise StoreError("Category not found", "not_found")

    async def create_post(self, ctx: SessionContext, post_data: PostCreate) -> Post:
        """Create a new post"""
        if not ctx.is_authenticated:
            raise AuthenticationError("You must be signed in to create a post")

        title = post_data.title.strip()
        content = post_data.content.strip()
        if not title or not content:
            raise ValidationError("Title and content are required")

        slug = slugify(title)
        if not slug:
            raise ValidationError("Title must contain at least one letter or digit")

        await self._check_category(post_data.category_id)

        post = Post(
            title=title,
            content=content,
            excerpt=post_data.excerpt,
            author_id=ctx.user_id,
            category_id=post_data.category_id,
            tags=[tag.strip() for tag in post_data.tags if tag.strip()],
            slug=slug,
            published=post_data.published,
            like_count=0
        )

        self.db.add(post)
        await self._commit("creating post")
        await self.db.refresh(post)

        logger.info(f"Created post {post.id} ({post.slug}) by user {ctx.user_id}")
        return post

    async def update_post(self, ctx: SessionContext, post_id: str, post_update: PostUpdate) -> Post:
        """Update a post owned by the caller"""
        post = await self._require_owned_post(ctx, post_id)

        changes = post_update.model_dump(exclude_unset=True)
        if "category_id" in changes:
            await self._check_category(changes["category_id"])
        for field in ("title", "content"):
            if field in changes and not (changes[field] or "").strip():
                raise ValidationError(f"{field.capitalize()} cannot be empty")
        # Only excerpt and category_id may be cleared
        for field in ("tags", "published"):
            if field in changes and changes[field] is None:
                raise ValidationError(f"{field.capitalize()} cannot be null")

        for field, value in changes.items():
            setattr(post, field, value)

        await self._commit("updating post")
        await self.db.refresh(post)

        logger.info(f"Updated post {post_id}")
        return post

    async def delete_post(self, ctx: SessionContext, post_id: str) -> None:
        """Delete a post owned by the caller, along with its comments and likes"""
        await self._require_owned_post(ctx, post_id)

        await self.db.execute(
            delete(Post).where(and_(Post.id == post_id, Post.author_id == ctx.user_id))
        )
        await self._commit("deleting post")
        logger.info(f"Deleted post {post_id}")

    async def toggle_post_like(self, ctx: SessionContext, post_id: str) -> PostLikeResponse:
        """Like the post, or take the caller's like back"""
        if not ctx.is_authenticated:
            raise AuthenticationError("Sign in to like posts")

        if await self.get_post(post_id) is None:
            raise StoreError("Post not found", "not_found")

        try:
            result = await self.db.execute(
                delete(PostLike).where(
                    and_(PostLike.post_id == post_id, PostLike.user_id == ctx.user_id)
                )
            )
            liked = result.rowcount == 0
            if liked:
                await self.db.execute(
                    insert(PostLike).values(post_id=post_id, user_id=ctx.user_id)
                )
            count = select(func.count(PostLike.id)).where(
                PostLike.post_id == post_id
            ).scalar_subquery()
            await self.db.execute(
                update(Post)
                .where(Post.id == post_id)
                .values(like_count=count)
                .execution_options(synchronize_session=False)
            )
        except SQLAlchemyError as e:
            logger.error(f"Error toggling like on post {post_id}: {e}")
            await self.db.rollback()
            raise StoreError("Store failure while toggling post like")
        await self._commit("toggling post like")

        like_count = await self.db.scalar(select(Post.like_count).where(Post.id == post_id))
        logger.info(f"User {ctx.user_id} {'liked' if liked else 'unliked'} post {post_id}")
        return PostLikeResponse(post_id=post_id, liked=liked, like_count=like_count)

    async def list_categories(self) -> List[Category]:
        result = await self.db.execute(select(Category).order_by(Category.name))
        return list(result.scalars().all())

    async def create_category(self, ctx: SessionContext, category_data: CategoryCreate) -> Category:
        if not ctx.is_authenticated:
            raise AuthenticationError("Sign in to create categories")

        name = category_data.name.strip()
        slug = slugify(category_data.slug or name)
        if not name or not slug:
            raise ValidationError("Category name is required")

        category = Category(name=name, slug=slug, description=category_data.description)
        self.db.add(category)
        await self._commit("creating category")
        await self.db.refresh(category)

        logger.info(f"Created category {category.slug}")
        return category
