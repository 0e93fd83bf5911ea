"""
Shared fixtures: fake Redis authorities.

Setiap authority punya FakeServer sendiri supaya benar-benar independent.
Authority yang "down" adalah server dengan connected = False.
"""

import pytest_asyncio
from fakeredis import FakeServer
from fakeredis.aioredis import FakeRedis


def create_client(server: FakeServer) -> FakeRedis:
    return FakeRedis(server=server, decode_responses=True)


@pytest_asyncio.fixture
async def server():
    return FakeServer()


@pytest_asyncio.fixture
async def client(server):
    c = create_client(server)
    yield c
    await c.aclose()


@pytest_asyncio.fixture
async def servers():
    return [FakeServer() for _ in range(3)]


@pytest_asyncio.fixture
async def clients(servers):
    created = [create_client(s) for s in servers]
    yield created
    for c in created:
        await c.aclose()
