"""Tests for server-side dispatch."""

import json
from http import HTTPStatus

import pytest

from tests.factories import (
    SECRET_TOKEN,
    create_playlist,
    delete_playlists,
    list_playlists,
    make_raw_request,
    playlists,
)
from typedrest.codecs import int_from_string
from typedrest.resources import Response
from typedrest.result import Err, Ok
from typedrest.server import (
    Fault,
    HandlerCall,
    InvalidRequestSchema,
    NonJsonRequestBody,
    UnexpectedRuntimeError,
    default_fault_classifier,
    implement,
)
from typedrest.server.dispatcher import encode_response, parse_body
from typedrest.settings import Settings


def _recording_classifier(faults: list[Fault]):
    classify = default_fault_classifier()

    def record(fault: Fault) -> Response:
        faults.append(fault)
        return classify(fault)

    return record


@pytest.mark.asyncio
async def test_dispatch_success() -> None:
    dispatcher = implement(playlists.get, list_playlists, default_fault_classifier())
    response = await dispatcher(make_raw_request())
    assert response.status_code == 200
    assert json.loads(response.body) == [{"name": "u1-2", "tracks": 3}]
    assert response.headers == {"content-type": "application/json"}


@pytest.mark.asyncio
async def test_dispatch_typed_error_response() -> None:
    dispatcher = implement(playlists.get, list_playlists, default_fault_classifier())
    response = await dispatcher.dispatch(make_raw_request(headers={"authorization-token": "wrong"}))
    assert response.status_code == 401
    assert json.loads(response.body) == {"error_details": "bad token"}


@pytest.mark.asyncio
async def test_handler_receives_decoded_inputs_and_stage() -> None:
    seen: list[HandlerCall] = []

    async def handler(call: HandlerCall):
        seen.append(call)
        return Ok(Response(HTTPStatus.OK, []))

    dispatcher = implement(playlists.get, handler, default_fault_classifier())
    await dispatcher.dispatch(make_raw_request(stage="prod"))
    (call,) = seen
    assert call.path_parameters == {"user_id": "u1"}
    assert call.query_parameters == {"page_number": 2}
    assert call.header_parameters["authorization-token"] == SECRET_TOKEN
    assert call.request_body is None
    assert call.stage == "prod"


@pytest.mark.asyncio
async def test_non_json_body_is_a_fault() -> None:
    faults: list[Fault] = []
    dispatcher = implement(playlists.post, create_playlist, _recording_classifier(faults))
    response = await dispatcher.dispatch(make_raw_request(body="{not json"))
    assert response.status_code == 400
    assert "not valid JSON" in json.loads(response.body)["error_details"]
    assert isinstance(faults[0], NonJsonRequestBody)


@pytest.mark.asyncio
async def test_schema_failures_are_reported_with_paths() -> None:
    faults: list[Fault] = []
    dispatcher = implement(playlists.get, list_playlists, _recording_classifier(faults))
    response = await dispatcher.dispatch(make_raw_request(query_parameters={"page_number": "abc"}))
    assert response.status_code == 400
    assert "query_parameters.page_number" in json.loads(response.body)["error_details"]
    (fault,) = faults
    assert isinstance(fault, InvalidRequestSchema)
    assert [failure.path for failure in fault.errors] == [("query_parameters", "page_number")]


@pytest.mark.asyncio
async def test_missing_header_and_path_parameter_are_both_reported() -> None:
    faults: list[Fault] = []
    dispatcher = implement(playlists.get, list_playlists, _recording_classifier(faults))
    await dispatcher.dispatch(make_raw_request(path_parameters={}, headers={}))
    (fault,) = faults
    assert isinstance(fault, InvalidRequestSchema)
    paths = {failure.path for failure in fault.errors}
    assert paths == {("path_parameters", "user_id"), ("header_parameters", "authorization-token")}


@pytest.mark.asyncio
async def test_excess_body_keys_are_rejected() -> None:
    dispatcher = implement(playlists.post, create_playlist, default_fault_classifier())
    response = await dispatcher.dispatch(make_raw_request(body=json.dumps({"name": "mix", "owner": "me"})))
    assert response.status_code == 400
    assert 'excess key "owner" found' in json.loads(response.body)["error_details"]

    accepted = await dispatcher.dispatch(make_raw_request(body=json.dumps({"name": "mix"})))
    assert accepted.status_code == 201
    assert json.loads(accepted.body) == {"name": "mix", "tracks": 0}


@pytest.mark.asyncio
async def test_empty_body_decodes_as_null() -> None:
    dispatcher = implement(playlists.post, create_playlist, default_fault_classifier())
    response = await dispatcher.dispatch(make_raw_request(body=""))
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_null_response_body_is_empty() -> None:
    dispatcher = implement(playlists.delete, delete_playlists, default_fault_classifier())
    response = await dispatcher.dispatch(make_raw_request())
    assert response.status_code == 204
    assert response.body == ""
    assert response.headers == {}


@pytest.mark.asyncio
async def test_handler_exceptions_never_leak() -> None:
    faults: list[Fault] = []

    async def handler(call: HandlerCall):
        raise RuntimeError("database password is hunter2")

    dispatcher = implement(playlists.get, handler, _recording_classifier(faults))
    response = await dispatcher.dispatch(make_raw_request())
    assert response.status_code == 500
    assert "hunter2" not in response.body
    assert json.loads(response.body) == {"error_details": "Details hidden for security"}
    assert isinstance(faults[0], UnexpectedRuntimeError)


@pytest.mark.asyncio
async def test_undeclared_handler_status_becomes_runtime_fault() -> None:
    async def handler(call: HandlerCall):
        return Ok(Response(HTTPStatus.ACCEPTED, []))

    dispatcher = implement(playlists.get, handler, default_fault_classifier())
    response = await dispatcher.dispatch(make_raw_request())
    assert response.status_code == 500


@pytest.mark.asyncio
async def test_non_result_handler_return_becomes_runtime_fault() -> None:
    async def handler(call: HandlerCall):
        return {"status": 200}

    dispatcher = implement(playlists.get, handler, default_fault_classifier())
    response = await dispatcher.dispatch(make_raw_request())
    assert response.status_code == 500


@pytest.mark.asyncio
async def test_failing_classifier_falls_back_to_bare_500() -> None:
    def classify(fault: Fault) -> Response:
        raise RuntimeError("classifier bug")

    async def handler(call: HandlerCall):
        raise RuntimeError("boom")

    dispatcher = implement(playlists.get, handler, classify)
    response = await dispatcher.dispatch(make_raw_request())
    assert response.status_code == 500
    assert response.body == ""


@pytest.mark.asyncio
async def test_error_outcome_encoded_with_error_codec() -> None:
    async def handler(call: HandlerCall):
        return Err(Response(HTTPStatus.BAD_REQUEST, {"error_details": "no"}))

    dispatcher = implement(playlists.get, handler, default_fault_classifier())
    response = await dispatcher.dispatch(make_raw_request())
    assert response.status_code == 400
    assert json.loads(response.body) == {"error_details": "no"}


def test_default_classifier_can_hide_decode_errors() -> None:
    classify = default_fault_classifier(Settings(expose_decode_errors=False))
    response = classify(NonJsonRequestBody(details="Expecting value"))
    assert response.status_code == 400
    assert response.body == {"error_details": "Malformed request"}


def test_parse_body() -> None:
    assert parse_body(None) == Ok(None)
    assert parse_body("") == Ok(None)
    assert parse_body('{"a": 1}') == Ok({"a": 1})
    assert isinstance(parse_body("{"), Err)


def test_encode_response_prefers_response_codec() -> None:
    raw = encode_response(Response(200, 5, int_from_string), playlists.get.success.body)
    assert raw.body == '"5"'


@pytest.mark.asyncio
async def test_oversized_integer_parameter_is_a_schema_fault() -> None:
    faults: list[Fault] = []
    dispatcher = implement(playlists.get, list_playlists, _recording_classifier(faults))
    response = await dispatcher.dispatch(make_raw_request(query_parameters={"page_number": "9" * 5000}))
    assert response.status_code == 400
    (fault,) = faults
    assert isinstance(fault, InvalidRequestSchema)


@pytest.mark.asyncio
async def test_deeply_nested_body_is_not_json() -> None:
    faults: list[Fault] = []
    dispatcher = implement(playlists.post, create_playlist, _recording_classifier(faults))
    response = await dispatcher.dispatch(make_raw_request(body="[" * 100000 + "]" * 100000))
    assert response.status_code == 400
    (fault,) = faults
    assert isinstance(fault, NonJsonRequestBody)
