"""Unit tests for the error code catalog"""
from uuid import uuid4

from placehub.decision.error_codes import ErrorCodeDictionary, ErrorKind
from placehub.exceptions import BadRequestError, NotFoundError


class TestErrorCodeDictionary:
    """Tests for error code lookup and serialization"""

    def test_get_error(self):
        error = ErrorCodeDictionary.get_error("LEGAL_002")

        assert error is ErrorCodeDictionary.LEGAL_002
        assert error.kind == ErrorKind.NOT_FOUND

    def test_get_unknown_error(self):
        assert ErrorCodeDictionary.get_error("NOPE_001") is None
        assert ErrorCodeDictionary.get_error("get_error") is None

    def test_with_message_keeps_code(self):
        error = ErrorCodeDictionary.PLACE_001.with_message("Place with id x not found")

        assert error.code == "PLACE_001"
        assert error.kind == ErrorKind.NOT_FOUND
        assert error.message == "Place with id x not found"
        assert ErrorCodeDictionary.PLACE_001.message == "Place not found"

    def test_codes_are_unique(self):
        codes = [
            value.code for name, value in vars(ErrorCodeDictionary).items()
            if ErrorCodeDictionary.get_error(name) is not None
        ]
        assert len(codes) == len(set(codes))


class TestExceptions:

    def test_to_dict(self):
        entity_id = uuid4()
        error = BadRequestError(ErrorCodeDictionary.SUBSCRIPTION_005, entity_id=entity_id, context={"a": 1})

        payload = error.to_dict()

        assert payload["code"] == "SUBSCRIPTION_005"
        assert payload["kind"] == "bad_request"
        assert payload["entity_id"] == str(entity_id)
        assert payload["context"] == {"a": 1}

    def test_message(self):
        error = NotFoundError(ErrorCodeDictionary.SLUG_001)

        assert error.message == "Slug not found"
        assert str(error) == "Slug not found"
