"""Helpers shared by the API tests."""

from collections.abc import Sequence
from datetime import datetime
from typing import Any

from fastapi.testclient import TestClient

from tasklist.db import QueryResult, get_database

ANN = {"name": "Ann", "email": "ann@x.com", "password": "secret1"}
BOB = {"name": "Bob", "email": "bob@x.com", "password": "hunter22"}


def run_sql(client: TestClient, statement: str, params: Sequence[Any] = ()) -> QueryResult:
    """Run a statement against the app's database on the app's event loop."""

    async def _run() -> QueryResult:
        database = await get_database()
        return await database.execute(statement, params)

    return client.portal.call(_run)


def register(client: TestClient, payload: dict) -> dict:
    response = client.post("/api/auth/register", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["user"]


def create_task(client: TestClient, user_id: int, title: str) -> dict:
    response = client.post(f"/api/users/{user_id}/tasks", json={"title": title})
    assert response.status_code == 201, response.text
    return response.json()


def parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))
