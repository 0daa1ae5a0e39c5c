from __future__ import annotations

from ..domain.queries import SERVICE_SORT
from .base_repository import MongoRepository


class ServicesRepository(MongoRepository):
    collection_name = "services"
    default_sort = SERVICE_SORT
