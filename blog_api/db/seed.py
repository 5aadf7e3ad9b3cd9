from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from blog_api.models.category import Category

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    ("Technology", "technology", "Posts about technology and programming"),
    ("Lifestyle", "lifestyle", "Posts about lifestyle and personal experiences"),
    ("Travel", "travel", "Travel stories and guides"),
    ("Food", "food", "Recipes and food experiences"),
    ("Business", "business", "Business insights and entrepreneurship"),
]

async def seed_categories(db: AsyncSession) -> int:
    """Insert the default categories that are missing; returns how many were added"""
    result = await db.execute(select(Category.slug))
    existing = set(result.scalars().all())

    created = 0
    for name, slug, description in DEFAULT_CATEGORIES:
        if slug in existing:
            continue
        db.add(Category(name=name, slug=slug, description=description))
        created += 1

    if created:
        await db.commit()
        logger.info(f"Seeded {created} default categories")
    return created
