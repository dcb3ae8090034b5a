"""
Test configuration and fixtures
"""
import os
from typing import AsyncGenerator

import numpy as np
import pytest
from httpx import AsyncClient, ASGITransport

# Set testing environment before the app module reads it
os.environ.setdefault('MONGO_URL', 'mongodb://localhost:27017')
os.environ.setdefault('DB_NAME', 'schoolhub_test')
os.environ['SEED_DEMO_DATA'] = 'false'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'

from schoolhub import server
from schoolhub.seed import seed_database
from schoolhub.utils.auth import token_for_user
from tests.fakes import InMemoryDocumentStore


@pytest.fixture
def store() -> InMemoryDocumentStore:
    """A fresh, empty in-memory document store"""
    return InMemoryDocumentStore()


@pytest.fixture
async def seeded_store(store: InMemoryDocumentStore) -> InMemoryDocumentStore:
    """Store holding the demo school, its users and records"""
    await seed_database(store)
    return store


@pytest.fixture
def app(store):
    """The FastAPI app wired to the in-memory store"""
    server.init_routers(store, np.random.default_rng(42))
    yield server.app
    server.init_routers(server.store)


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac


def _headers_for(user: dict) -> dict:
    return {'Authorization': f'Bearer {token_for_user(user)}'}


@pytest.fixture
def admin_headers() -> dict:
    """Bearer headers for a gov_admin"""
    return _headers_for({'id': 1, 'username': 'admin', 'role': 'gov_admin', 'name': 'Government Admin'})


@pytest.fixture
def teacher_headers() -> dict:
    """Bearer headers for a teacher (not allowed on admin routes)"""
    return _headers_for({'id': 2, 'username': 'teacher', 'role': 'teacher', 'name': 'Edna Krabappel',
                         'school_id': 1})


def school_payload(**overrides) -> dict:
    payload = {
        'name': 'Riverside School',
        'location': 'Riverside',
        'district': 'North',
        'performance_score': 70,
        'teacher_shortage': False,
        'shortage_details': [],
    }
    payload.update(overrides)
    return payload


def student_payload(school_id: int, **overrides) -> dict:
    payload = {
        'school_id': school_id,
        'registration_no': 'REG-001',
        'father_name': 'Father',
        'mother_name': 'Mother',
        'address': '1 Main Street',
        'permanent_address': '1 Main Street',
        'gender': 'female',
        'age': 14,
        'parent_mobile_number': '5550123',
        'grade': '9',
        'attendance_rate': 95,
        'marks': 80,
    }
    payload.update(overrides)
    return payload
