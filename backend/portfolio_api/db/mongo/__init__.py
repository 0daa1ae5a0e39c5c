"""Shared MongoDB utilities.

This package centralizes:
- pymongo client construction
- mapping of driver exceptions onto typed storage errors
- page/offset pagination helpers
- reference expansion and API serialization of stored documents
- index management

"""
