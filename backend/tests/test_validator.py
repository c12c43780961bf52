"""
SmartHome API: Schema Validator Unit Tests
==========================================

What we test:
    ✅ Packaged schemas load and compile
    ✅ Valid / invalid payloads for user_create and device_create
    ✅ Fail-closed behaviour: unknown schema, non-object payload, raising check
"""

import json
from unittest.mock import MagicMock

import pytest
from jsonschema.exceptions import SchemaError

from smarthome.config import PACKAGED_SCHEMA_DIR
from smarthome.services.validator import SchemaValidator


class TestSchemaLoading:

    @pytest.mark.asyncio
    async def test_packaged_schemas_are_registered(self):
        validator = await SchemaValidator.from_directory(PACKAGED_SCHEMA_DIR)
        assert validator.names == ["device_create", "user_create"]

    @pytest.mark.asyncio
    async def test_from_directory_uses_file_stem_as_name(self, tmp_path):
        (tmp_path / "things").mkdir()
        (tmp_path / "things" / "thing_create.json").write_text(
            json.dumps({"type": "object", "required": ["name"]})
        )

        validator = await SchemaValidator.from_directory(tmp_path)

        assert validator.names == ["thing_create"]
        assert validator.validate("thing_create", {"name": "lamp"}) == (True, None)

    def test_invalid_schema_is_rejected_at_registration(self):
        with pytest.raises(SchemaError):
            SchemaValidator({"broken": {"type": "not-a-type"}})


class TestValidate:

    def test_valid_user(self, validator):
        valid, errors = validator.validate("user_create", {"username": "alice", "password": "x"})
        assert valid is True
        assert errors is None

    def test_user_extra_fields_allowed(self, validator):
        valid, _ = validator.validate(
            "user_create", {"username": "alice", "password": "x", "email": "a@example.com"}
        )
        assert valid is True

    def test_user_missing_password(self, validator):
        valid, errors = validator.validate("user_create", {"username": "alice"})
        assert valid is False
        assert len(errors) == 1
        assert "password" in errors[0]["message"]

    def test_user_empty_username(self, validator):
        valid, errors = validator.validate("user_create", {"username": "", "password": "x"})
        assert valid is False
        assert errors[0]["path"] == "$.username"

    def test_device_requires_chip_id(self, validator):
        assert validator.validate("device_create", {"chipId": "esp-01", "room": "kitchen"})[0] is True
        assert validator.validate("device_create", {"room": "kitchen"})[0] is False

    @pytest.mark.parametrize("schema, payload", [
        ("user_create", {"username": "alice", "password": "x", "_id": "bob"}),
        ("user_create", {"username": "alice", "password": "x", "_id": {"a": 1}}),
        ("device_create", {"chipId": "esp-01", "_id": "65a1b2c3d4e5f6a7b8c9d0e1"}),
    ])
    def test_client_supplied_id_is_rejected(self, validator, schema, payload):
        valid, errors = validator.validate(schema, payload)
        assert valid is False
        assert errors

    def test_non_object_payload_is_invalid(self, validator):
        for payload in (None, [], "alice", 42):
            valid, errors = validator.validate("user_create", payload)
            assert valid is False
            assert errors

    def test_unknown_schema_fails_closed(self, validator):
        assert validator.validate("user_update", {"username": "alice"}) == (False, None)

    def test_raising_check_fails_closed(self, validator):
        validator._validators["user_create"] = MagicMock(
            iter_errors=MagicMock(side_effect=RuntimeError("boom"))
        )
        assert validator.validate("user_create", {"username": "a", "password": "b"}) == (False, None)
