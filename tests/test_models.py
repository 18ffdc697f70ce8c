"""Tests for token info and record models."""

from datetime import datetime, timedelta, timezone

from oauth2_mongo.oauth.models import (
    BasicRecord,
    TokenCollectionConfig,
    TokenInfo,
    TokenRecord,
)
from oauth2_mongo.settings import Settings

EXPIRES = datetime(2024, 5, 1, 13, 0, tzinfo=timezone.utc)


def test_token_info_payload_round_trip(make_token_info):
    info = make_token_info(code="c1", access="a1", refresh="r1")
    restored = TokenInfo.model_validate_json(info.model_dump_json())

    assert restored == info
    assert restored.access_expires_in == timedelta(hours=1)


def test_token_info_accepts_expires_in_seconds():
    info = TokenInfo.model_validate_json('{"access": "a1", "access_expires_in": 3600}')

    assert info.access_expires_in == timedelta(hours=1)
    assert info.refresh == ""
    assert info.code_create_at is None


def test_basic_record_document_layout():
    record = BasicRecord(id="c1", data="{}", expired_at=EXPIRES)

    assert record.to_document() == {"_id": "c1", "data": "{}", "expired_at": EXPIRES}
    assert BasicRecord.from_document(record.to_document()) == record


def test_token_record_from_document_ignores_extra_fields():
    record = TokenRecord.from_document(
        {"_id": "a1", "basic_id": "65f0c0ffee0000000000abcd", "expired_at": EXPIRES, "v": 1}
    )

    assert record.id == "a1"
    assert record.basic_id == "65f0c0ffee0000000000abcd"


def test_default_collection_names():
    collections = TokenCollectionConfig()

    assert collections.txn == "oauth2_txn"
    assert collections.basic == "oauth2_basic"
    assert collections.access == "oauth2_access"
    assert collections.refresh == "oauth2_refresh"


def test_settings_collection_overrides(monkeypatch):
    monkeypatch.setenv("OAUTH2_ACCESS_COLLECTION", "tenant_a_access")
    monkeypatch.setenv("TOKEN_TTL_EXPIRE_AFTER_SECONDS", "0")
    settings = Settings()

    collections = settings.token_collection_config()
    assert collections.access == "tenant_a_access"
    assert collections.basic == "oauth2_basic"
    assert settings.token_ttl_expire_after_seconds == 0
