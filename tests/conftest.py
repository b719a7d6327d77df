from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from main import app, get_auth_service, get_repository
from moto_app.contracts import MotorcycleRepository
from moto_app.db import create_session_factory
from moto_app.entity import Motorcycle
from moto_app.enums import AuthorizationRole
from moto_app.repository import InMemoryMotorcycleRepository
from moto_app.security import ConfiguredAuthService
from moto_app.sql_repository import SqlMotorcycleRepository

HONDA_VIN = "01234567890123456"
KTM_VIN = "KTM35000000000001"


@pytest.fixture
def repository():
    return InMemoryMotorcycleRepository()


@pytest.fixture
def sql_repository():
    # a fresh in-memory database per test
    repo = SqlMotorcycleRepository(create_session_factory("sqlite://"))
    yield repo
    repo.close()


@pytest.fixture
def honda():
    return Motorcycle(make="Honda", model="Shadow", year=2006, vin=HONDA_VIN)


@pytest.fixture
def ktm():
    return Motorcycle(make="KTM", model="350 EXC-F", year=2018, vin=KTM_VIN)


@pytest.fixture
def admin_auth():
    return ConfiguredAuthService(True, {AuthorizationRole.ADMIN: True})


@pytest.fixture
def anonymous_auth():
    return ConfiguredAuthService(False, {AuthorizationRole.ADMIN: True})


@pytest.fixture
def general_auth():
    return ConfiguredAuthService(True, {AuthorizationRole.GENERAL: True})


@pytest.fixture
def mock_repository():
    # Create a spy repository that finds nothing
    mock_repo = MagicMock(spec=MotorcycleRepository)
    mock_repo.find_by_vin.return_value = None
    mock_repo.find_by_id.return_value = None
    mock_repo.list.return_value = []
    return mock_repo


@pytest.fixture
def client(repository, admin_auth):
    app.dependency_overrides[get_repository] = lambda: repository
    app.dependency_overrides[get_auth_service] = lambda: admin_auth
    yield TestClient(app)
    app.dependency_overrides.clear()
