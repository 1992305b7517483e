"""Shared fixtures: seeded in-memory client and bound repositories."""

import pytest

from db_repository.composite import CompositeRepository
from db_repository.config.models import CompositeTableConfig, TableConfig
from db_repository.repository import Repository

from fakes import FakeQueryClient, User, UserRole

USERS = [
    {"id": 1, "name": "Alice", "email": "alice@example.com"},
    {"id": 2, "name": "Bob", "email": "bob@example.com"},
    {"id": 3, "name": "Carol", "email": "carol@example.com"},
]

USER_ROLES = [
    {"id": 1, "user_id": 5, "role_id": 2, "note": "first"},
    {"id": 2, "user_id": 5, "role_id": 3, "note": None},
    {"id": 3, "user_id": 5, "role_id": 2, "note": "second"},
    {"id": 4, "user_id": 6, "role_id": 2, "note": None},
    {"id": 7, "user_id": 5, "role_id": 2, "note": "latest"},
]


@pytest.fixture
def client() -> FakeQueryClient:
    return FakeQueryClient({"users": USERS, "user_roles": USER_ROLES})


@pytest.fixture
def users(client: FakeQueryClient) -> Repository:
    return Repository(client, TableConfig(table="users", primary_key="id"), User)


@pytest.fixture
def user_roles(client: FakeQueryClient) -> CompositeRepository:
    config = CompositeTableConfig(
        table="user_roles",
        primary_key="id",
        fields=("id", "user_id", "role_id", "note"),
        fk_from="user_id",
        fk_to="role_id",
    )
    return CompositeRepository(client, config, UserRole)
