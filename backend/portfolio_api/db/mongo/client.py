from __future__ import annotations

from pymongo import MongoClient
from pymongo.database import Database


def mongo_client(uri: str) -> MongoClient:
    return MongoClient(
        uri,
        appname="portfolio-api",
        serverSelectionTimeoutMS=5000,
        connectTimeoutMS=5000,
        tz_aware=True,
    )


def mongo_database(client: MongoClient, name: str) -> Database:
    return client[name]
