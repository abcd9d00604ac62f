"""
Tests for Wire Models and Errors

Tests for the envelope codec, field-name mapping and the error taxonomy.
"""

import json
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import pytest
from typing_extensions import TypedDict

from iterate_client.api import (
    APIError,
    APIRequestError,
    InvalidAPIResponse,
    InvalidAPIUrl,
    IterateError,
    JSONCodec,
    JSONDecodingError,
    Response,
    WireModel,
)


class Question(WireModel):
    questionId: str
    prompt: str


class Survey(WireModel):
    id: str
    display_title: Optional[str] = None
    questions: List[Question] = []


@dataclass
class Trigger:
    surveyId: str
    triggerType: Optional[str] = None


@dataclass
class EmbedContext:
    userTraits: Dict[str, str] = field(default_factory=dict)
    triggers: List[Trigger] = field(default_factory=list)


class Tracking(TypedDict):
    lastUpdated: int


class TestJSONCodec:
    """Tests for envelope decoding and body encoding."""

    @pytest.fixture
    def codec(self):
        return JSONCodec()

    def test_decode_nested_snake_case(self, codec):
        data = json.dumps({
            "results": {
                "id": "s1",
                "display_title": "How are we doing?",
                "questions": [{"question_id": "q1", "prompt": "Rate us"}],
            },
            "error": None,
        }).encode()

        envelope = codec.decode(data, Survey)

        assert isinstance(envelope, Response)
        assert envelope.error is None
        assert envelope.results.display_title == "How are we doing?"
        assert envelope.results.questions[0].questionId == "q1"

    def test_decode_missing_fields_defaults_to_none(self, codec):
        envelope = codec.decode(b"{}", Survey)

        assert envelope.results is None
        assert envelope.error is None

    def test_decode_scalar_results(self, codec):
        envelope = codec.decode(b'{"results": 5, "error": null}', int)
        assert envelope.results == 5

    @pytest.mark.parametrize("data", [
        b"not json",
        b"[]",
        b'"text"',
        b'{"results": {"id": 1}, "error": null}',
        b'{"results": null, "error": 42}',
    ])
    def test_decode_failures(self, codec, data):
        with pytest.raises(JSONDecodingError):
            codec.decode(data, Survey)

    def test_encode_uses_wire_names_and_drops_nulls(self, codec):
        survey = Survey(id="s1", questions=[Question(questionId="q1", prompt="Rate us")])

        assert json.loads(codec.encode(survey)) == {
            "id": "s1",
            "questions": [{"question_id": "q1", "prompt": "Rate us"}],
        }

    def test_encode_plain_values(self, codec):
        assert json.loads(codec.encode({"type": "mobile"})) == {"type": "mobile"}

    def test_models_accept_field_names(self):
        question = Question.model_validate({"questionId": "q2", "prompt": "Why?"})
        assert question.questionId == "q2"


class TestPlainResultTypes:
    """Tests for snake_case mapping on dataclasses and TypedDicts."""

    @pytest.fixture
    def codec(self):
        return JSONCodec()

    def test_decode_dataclass(self, codec):
        data = json.dumps({
            "results": {
                "user_traits": {"plan": "pro"},
                "triggers": [{"survey_id": "s1", "trigger_type": "manual"}],
            },
            "error": None,
        }).encode()

        results = codec.decode(data, EmbedContext).results

        assert isinstance(results, EmbedContext)
        assert results.userTraits == {"plan": "pro"}
        assert results.triggers == [Trigger(surveyId="s1", triggerType="manual")]

    def test_decode_typeddict(self, codec):
        envelope = codec.decode(b'{"results": {"last_updated": 12}, "error": null}', Tracking)
        assert envelope.results == {"lastUpdated": 12}

    def test_decode_dataclass_missing_field(self, codec):
        with pytest.raises(JSONDecodingError):
            codec.decode(b'{"results": {"trigger_type": "x"}, "error": null}', Trigger)

    def test_decode_dataclass_with_error(self, codec):
        envelope = codec.decode(b'{"results": null, "error": "denied"}', Trigger)

        assert envelope.results is None
        assert envelope.error == "denied"

    def test_encode_dataclass(self, codec):
        context = EmbedContext(userTraits={"plan": "pro"}, triggers=[Trigger(surveyId="s1")])

        assert json.loads(codec.encode(context)) == {
            "user_traits": {"plan": "pro"},
            "triggers": [{"survey_id": "s1"}],
        }


class TestErrors:
    """Tests for the error taxonomy."""

    @pytest.mark.parametrize("error_type,code", [
        (InvalidAPIUrl, "invalid_api_url"),
        (APIRequestError, "api_request_error"),
        (InvalidAPIResponse, "invalid_api_response"),
        (JSONDecodingError, "json_decoding"),
    ])
    def test_codes(self, error_type, code):
        error = error_type()

        assert isinstance(error, IterateError)
        assert error.code == code
        assert error.message

    def test_api_error_keeps_message(self):
        error = APIError("bad input")

        assert error.code == "api_error"
        assert error.message == "bad input"
        assert str(error) == "bad input"

    def test_api_error_keeps_empty_message(self):
        assert APIError("").message == ""

    def test_equality(self):
        assert APIError("a") == APIError("a")
        assert APIError("a") != APIError("b")
        assert InvalidAPIUrl() != InvalidAPIResponse()
        assert repr(APIError("a")) == "APIError('a')"
