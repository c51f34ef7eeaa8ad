"""공유 pytest fixture 모음."""

import pytest
from unittest.mock import AsyncMock

from specflow.models import AutoSaveConfig, CreateProjectData


REQUIREMENTS_CONTENT = """# Introduction

This document describes the login feature of the sample application.

## Requirement 1

**User Story:** As a user, I want to log in with my email, so that I can access my account.

#### Acceptance Criteria

1. WHEN the user submits valid credentials THEN the system SHALL create a session
2. IF the password is wrong THEN the system SHALL show an error message

## Requirement 2

**User Story:** As an admin, I want to lock accounts, so that abuse can be stopped.
"""

DESIGN_CONTENT = """# Overview

The login service authenticates users and issues sessions.

## Architecture

```mermaid
graph TD
  Client --> API --> Database
```

The API is written with a Python web framework. Sessions live in a Redis database.
Passwords are hashed with a well-known library. The implementation language is Python.

## Components

- AuthController: handles the login form
- SessionStore: persists sessions

## Data Models

- User(id, email, password_hash)
- Session(id, user_id, expires_at)
"""

TASKS_CONTENT = """# Implementation Plan

- [ ] 1. Set up project structure
  - _Requirements: 1.1_
- [ ] 1.1 Implement user authentication
  - _Requirements: 1.1, 1.2_
- [ ] 2. Add account locking
  - _Requirements: 2.1_
"""


@pytest.fixture
def requirements_content():
    return REQUIREMENTS_CONTENT


@pytest.fixture
def design_content():
    return DESIGN_CONTENT


@pytest.fixture
def tasks_content():
    return TASKS_CONTENT


@pytest.fixture
def project_data():
    """CreateProjectData fixture."""
    return CreateProjectData(
        name="로그인 기능",
        description="이메일 로그인 명세",
        domain="web",
    )


@pytest.fixture
def mock_persistence():
    """DocumentPersistence mock fixture."""
    persistence = AsyncMock()
    persistence.commit = AsyncMock(return_value=None)
    persistence.load = AsyncMock(return_value=None)
    return persistence


@pytest.fixture
async def store(mock_persistence):
    """자동 저장이 꺼진 DocumentStore fixture."""
    from specflow.services.document_store import DocumentStore

    s = DocumentStore(
        persistence=mock_persistence,
        auto_save_config=AutoSaveConfig(enabled=False),
    )
    yield s
    await s.shutdown()


@pytest.fixture
def temp_storage(tmp_path):
    """임시 디렉토리 기반 FileStorage fixture."""
    from specflow.services.file_storage import FileStorage
    return FileStorage(base_path=str(tmp_path))


@pytest.fixture
async def api_store(temp_storage, monkeypatch):
    """API 테스트용 저장소. 전역 싱글톤을 임시 디렉토리 기반 인스턴스로 교체합니다."""
    from specflow.services import document_store
    from specflow.services.document_store import DocumentStore

    s = DocumentStore(
        persistence=temp_storage,
        auto_save_config=AutoSaveConfig(enabled=False),
    )
    monkeypatch.setattr(document_store, "_document_store", s)
    yield s
    await s.shutdown()


@pytest.fixture
async def client(api_store):
    """httpx AsyncClient fixture (FastAPI 테스트용)."""
    from httpx import AsyncClient, ASGITransport
    from specflow.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
