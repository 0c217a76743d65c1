import os
import tempfile

# NOTE: artify 모듈 import 전에 설정해야 config 모듈 상수에 반영됨
os.environ["STORE_BACKEND"] = "memory"
os.environ["SUPABASE_URL"] = ""
os.environ["SUPABASE_KEY"] = ""
os.environ["SUPABASE_CREDENTIALS_FILE"] = ""
os.environ["RATE_LIMIT_PER_MINUTE"] = "1000"
os.environ["LOG_DIR"] = tempfile.mkdtemp(prefix="artify-test-logs-")

from datetime import datetime, timedelta, timezone
from typing import Dict

import pytest
from fastapi.testclient import TestClient

from artify.api.dependencies import get_document_store, get_identity_verifier
from artify.auth.principal import Principal
from artify.core.limiter import limiter
from artify.exception.auth.auth_exception import ForbiddenError
from artify.main import app
from artify.repositories.memory import MemoryDocumentStore

ALICE = Principal(
    subject_id="uid-alice",
    email="alice@example.com",
    display_name="Alice Kim",
    avatar_url="https://cdn.example.com/alice.png",
)
BOB = Principal(subject_id="uid-bob", email="bob@example.com", display_name="Bob Lee")

BASE_TIME = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


class StaticIdentityVerifier:
    """토큰 문자열 -> Principal 고정 매핑 (테스트용 인증 공급자)"""

    def __init__(self, principals: Dict[str, Principal]):
        self.principals = principals
        self.calls = 0

    def verify(self, token: str) -> Principal:
        self.calls += 1
        try:
            return self.principals[token]
        except KeyError:
            raise ForbiddenError()


@pytest.fixture
def store():
    """각 테스트마다 독립적인 메모리 저장소"""
    return MemoryDocumentStore()


@pytest.fixture
def verifier():
    return StaticIdentityVerifier({"alice-token": ALICE, "bob-token": BOB})


@pytest.fixture
def client(store, verifier):
    """Dependency override가 적용된 TestClient 제공 및 자동 정리"""
    app.dependency_overrides[get_document_store] = lambda: store
    app.dependency_overrides[get_identity_verifier] = lambda: verifier
    limiter.reset()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def alice_headers():
    return {"Authorization": "Bearer alice-token"}


@pytest.fixture
def bob_headers():
    return {"Authorization": "Bearer bob-token"}


@pytest.fixture
def make_artwork(store):
    """저장소에 작품을 직접 추가하고 ID를 반환하는 팩토리"""
    counter = {"n": 0}

    def _make(owner: Principal = ALICE, **overrides) -> str:
        counter["n"] += 1
        doc = {
            "title": f"Artwork {counter['n']}",
            "image_url": f"https://cdn.example.com/{counter['n']}.png",
            "category": "Abstract",
            "visibility": "Public",
            "user_email": owner.email,
            "user_name": owner.display_name,
            "user_photo_url": owner.avatar_url,
            "created_at": BASE_TIME + timedelta(minutes=counter["n"]),
            "likes": 0,
        }
        doc.update(overrides)
        return store.artworks.insert(doc)

    return _make


@pytest.fixture
def alice():
    return ALICE


@pytest.fixture
def bob():
    return BOB
