"""Tests for the API Gateway adapter."""

import base64
import json

from tests.factories import SECRET_TOKEN, create_playlist, list_playlists, playlists
from typedrest.server import (
    RawResponse,
    default_fault_classifier,
    implement,
    lambda_handler,
    request_from_event,
    result_from_response,
)


def _event(**overrides) -> dict:
    event = {
        "body": None,
        "pathParameters": {"user_id": "u7"},
        "queryStringParameters": None,
        "headers": {"Authorization-Token": SECRET_TOKEN},
        "requestContext": {"stage": "prod"},
        "isBase64Encoded": False,
    }
    event.update(overrides)
    return event


def test_request_from_event_defaults_missing_maps() -> None:
    request = request_from_event({"body": None})
    assert request.path_parameters == {}
    assert request.query_parameters == {}
    assert request.headers == {}
    assert request.stage == ""


def test_request_from_event_decodes_base64_bodies() -> None:
    payload = base64.b64encode(b'{"name": "mix"}').decode()
    request = request_from_event(_event(body=payload, isBase64Encoded=True))
    assert request.body == '{"name": "mix"}'
    assert request.stage == "prod"


def test_result_from_response() -> None:
    assert result_from_response(RawResponse(204, "")) == {"statusCode": 204, "body": ""}
    result = result_from_response(RawResponse(200, "[]", {"content-type": "application/json"}))
    assert result["headers"] == {"content-type": "application/json"}


def test_lambda_handler_end_to_end() -> None:
    handle = lambda_handler(implement(playlists.get, list_playlists, default_fault_classifier()))
    result = handle(_event(), None)
    assert result["statusCode"] == 200
    assert json.loads(result["body"]) == [{"name": "u7-1", "tracks": 3}]


def test_lambda_handler_rejects_bad_body() -> None:
    handle = lambda_handler(implement(playlists.post, create_playlist, default_fault_classifier()))
    result = handle(_event(body="not json"), None)
    assert result["statusCode"] == 400
    assert "error_details" in json.loads(result["body"])
