# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import pytest

from upcheck.errors import NotFoundError, ValidationError
from upcheck.models import DEFAULT_CONTENT_TYPE, HttpMethod, TargetConfig, TargetUpdate
from upcheck.store import TargetStore


def test_create_assigns_unique_ids_and_defaults():
    store = TargetStore()
    a = store.create(TargetConfig(name="a", url="https://a.example"))
    b = store.create(TargetConfig(name="b", url="http://b.example"))

    assert a.id != b.id
    assert a.method is HttpMethod.GET
    assert a.timeout == 3.0
    assert (a.expected_status_min, a.expected_status_max) == (200, 299)
    assert a.slow_threshold == 2.0
    assert a.max_retries == 2
    assert a.content_type is None
    assert [t.id for t in store.list()] == [a.id, b.id]
    assert store.get(a.id) is a


def test_body_defaults_content_type_to_json():
    target = TargetConfig(name="a", url="https://a.example", method="post", request_body="{}").build()
    assert target.method is HttpMethod.POST
    assert target.content_type == DEFAULT_CONTENT_TYPE

    explicit = TargetConfig(name="a", url="https://a.example", request_body="x", content_type="text/plain").build()
    assert explicit.content_type == "text/plain"


def test_durations_accept_strings():
    target = TargetConfig(name="a", url="https://a.example", timeout="500ms", slow_threshold="2s").build()
    assert target.timeout == 0.5
    assert target.slow_threshold_ms == 2000


@pytest.mark.parametrize(
    ("overrides", "field"),
    [
        ({"name": "  "}, "name"),
        ({"url": "ftp://example.com"}, "url"),
        ({"method": "TRACE"}, "method"),
        ({"timeout": 0}, "timeout"),
        ({"timeout": "soon"}, "timeout"),
        ({"slow_threshold": -1}, "slow_threshold"),
        ({"expected_status_min": 99}, "expected_status_min"),
        ({"expected_status_min": 300, "expected_status_max": 200}, "expected_status_min"),
        ({"max_retries": -1}, "max_retries"),
        ({"headers": ["X-One"]}, "headers"),
        ({"expect_json": "false"}, "expect_json"),
    ],
)
def test_invalid_config_rejected(overrides, field):
    store = TargetStore()
    values = {"name": "a", "url": "https://a.example"}
    values.update(overrides)
    with pytest.raises(ValidationError) as excinfo:
        store.create(TargetConfig(**values))
    assert excinfo.value.field == field
    assert len(store) == 0


def test_from_mapping_requires_name_and_rejects_unknown_fields():
    with pytest.raises(ValidationError):
        TargetConfig.from_mapping({"url": "https://a.example"})
    with pytest.raises(ValidationError) as excinfo:
        TargetConfig.from_mapping({"name": "a", "url": "https://a.example", "colour": "red"})
    assert excinfo.value.field == "colour"
    with pytest.raises(ValidationError):
        TargetUpdate.from_mapping({"id": "new-id"})
    with pytest.raises(ValidationError) as excinfo:
        TargetConfig.from_mapping({"name": "a", "url": "https://a.example", "expect_json": "false"}).build()
    assert excinfo.value.field == "expect_json"


def test_partial_update_keeps_identity_and_unspecified_fields():
    store = TargetStore()
    target = store.create(TargetConfig(name="a", url="https://a.example", max_retries=4))

    updated = store.update(target.id, TargetUpdate(name="renamed", timeout="1s"))

    assert updated.id == target.id
    assert updated.name == "renamed"
    assert updated.timeout == 1.0
    assert updated.max_retries == 4
    assert store.get(target.id) is updated
    # Snapshots handed out earlier are untouched.
    assert target.name == "a"


def test_update_body_sets_content_type_only_when_unset():
    store = TargetStore()
    bare = store.create(TargetConfig(name="a", url="https://a.example"))
    assert store.update(bare.id, TargetUpdate(request_body="{}")).content_type == DEFAULT_CONTENT_TYPE

    typed = store.create(TargetConfig(name="b", url="https://b.example", request_body="x", content_type="text/plain"))
    assert store.update(typed.id, TargetUpdate(request_body="y")).content_type == "text/plain"
    assert store.update(typed.id, TargetUpdate(request_body="z", content_type="text/csv")).content_type == "text/csv"


def test_invalid_update_is_atomic():
    store = TargetStore()
    target = store.create(TargetConfig(name="a", url="https://a.example"))
    with pytest.raises(ValidationError):
        store.update(target.id, TargetUpdate(name="b", expected_status_min=400))
    assert store.get(target.id) is target


def test_missing_ids():
    store = TargetStore()
    with pytest.raises(NotFoundError):
        store.get("missing")
    with pytest.raises(NotFoundError):
        store.update("missing", TargetUpdate(name="x"))
    assert store.delete("missing") is False


def test_delete():
    store = TargetStore()
    target = store.create(TargetConfig(name="a", url="https://a.example"))
    assert target.id in store
    assert store.delete(target.id) is True
    assert target.id not in store
    assert store.delete(target.id) is False


def test_update_rejects_non_boolean_expect_json():
    store = TargetStore()
    target = store.create(TargetConfig(name="a", url="https://a.example"))

    with pytest.raises(ValidationError) as excinfo:
        store.update(target.id, TargetUpdate.from_mapping({"expect_json": 1}))

    assert excinfo.value.field == "expect_json"
    assert store.get(target.id).expect_json is False
