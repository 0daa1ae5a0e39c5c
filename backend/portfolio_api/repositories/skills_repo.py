from __future__ import annotations

from ..domain.queries import SKILL_SORT
from .base_repository import MongoRepository


class SkillsRepository(MongoRepository):
    collection_name = "skills"
    default_sort = SKILL_SORT
