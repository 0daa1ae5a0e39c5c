from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property

from fastapi import Request
from pymongo import MongoClient
from pymongo.database import Database

from .db.mongo.client import mongo_client, mongo_database
from .db.mongo.indexes import ensure_indexes
from .infrastructure.images import CloudinaryImageHost, ImageHost
from .repositories.blog_repo import BlogRepository
from .repositories.content_repo import ContentRepository
from .repositories.pricing_repo import PricingRepository
from .repositories.projects_repo import ProjectsRepository
from .repositories.services_repo import ServicesRepository
from .repositories.skills_repo import SkillsRepository
from .repositories.users_repo import UsersRepository
from .settings import Settings


@dataclass
class AppContext:
    """
    Everything a request handler needs: settings, the database handle and
    the image host. Built once at startup and closed at shutdown.
    """

    settings: Settings
    db: Database
    images: ImageHost
    client: MongoClient | None = field(default=None, repr=False)

    @cached_property
    def users(self) -> UsersRepository:
        return UsersRepository(self.db)

    @cached_property
    def blog(self) -> BlogRepository:
        return BlogRepository(self.db)

    @cached_property
    def projects(self) -> ProjectsRepository:
        return ProjectsRepository(self.db)

    @cached_property
    def services(self) -> ServicesRepository:
        return ServicesRepository(self.db)

    @cached_property
    def skills(self) -> SkillsRepository:
        return SkillsRepository(self.db)

    @cached_property
    def pricing(self) -> PricingRepository:
        return PricingRepository(self.db)

    @cached_property
    def content(self) -> ContentRepository:
        return ContentRepository(self.db)

    async def aclose(self) -> None:
        await self.images.aclose()
        if self.client is not None:
            self.client.close()


def build_context(settings: Settings) -> AppContext:
    """Validate required settings, connect, and ensure indexes."""
    settings.require_runtime_config()
    client = mongo_client(str(settings.mongo_uri))
    db = mongo_database(client, settings.mongo_db_name)
    ensure_indexes(db)
    return AppContext(
        settings=settings,
        db=db,
        images=CloudinaryImageHost.from_settings(settings),
        client=client,
    )


def get_context(request: Request) -> AppContext:
    return request.app.state.context
