import pytest
from pydantic import BaseModel, ValidationError

from core.domain.models import DEFAULT_CLIENT_ID, Request, Response, Verb
from core.errors import ParseError


def _full_request() -> Request:
    return Request(
        path="/users",
        verb=Verb.POST,
        version="/v1",
        body='{"name":"Ann"}',
        content_type="application/json",
        headers={"X-A": "1"},
        query_params={"q": "1"},
        form_params={"f": "1"},
        path_params={"id": "1"},
        params={"p": 1},
    )


def test_defaults_are_empty_not_none():
    req = Request()

    assert req.path == ""
    assert req.body == ""
    assert req.version == ""
    assert req.verb is None
    assert req.content_type is None
    assert req.headers == {}
    assert req.query_params == {}
    assert req.form_params == {}
    assert req.path_params == {}
    assert req.params == {}


def test_assigning_none_to_mapping_stores_empty_mapping():
    req = Request(headers=None)
    req.query_params = None

    assert req.headers == {}
    assert req.query_params == {}


def test_copy_is_independent_from_source():
    source = _full_request()
    copy = source.copy()

    copy.headers["X-B"] = "2"
    copy.query_params.clear()
    copy.form_params["g"] = "2"
    copy.path_params.pop("id")
    copy.params["extra"] = True
    copy.path = "/other"

    assert source.headers == {"X-A": "1"}
    assert source.query_params == {"q": "1"}
    assert source.form_params == {"f": "1"}
    assert source.path_params == {"id": "1"}
    assert source.params == {"p": 1}
    assert source.path == "/users"


def test_copy_keeps_scalar_fields():
    copy = _full_request().copy()

    assert copy.verb is Verb.POST
    assert copy.version == "/v1"
    assert copy.content_type == "application/json"
    assert copy.body == '{"name":"Ann"}'


def test_clear_resets_path_body_and_mappings_only():
    req = _full_request()

    req.clear()

    assert req.path == ""
    assert req.body == ""
    assert req.headers == {}
    assert req.query_params == {}
    assert req.form_params == {}
    assert req.path_params == {}
    assert req.params == {}
    assert req.content_type == "application/json"
    assert req.version == "/v1"
    assert req.verb is Verb.POST


def test_generate_seeds_client_id_and_json_content_type():
    req = Request.generate('{"a":1}', "/items")

    assert req.headers == {"X-Client-Id": DEFAULT_CLIENT_ID}
    assert req.content_type == "application/json"
    assert req.body == '{"a":1}'
    assert req.path == "/items"

    assert Request.generate("", "/x", client_id="qa").headers["X-Client-Id"] == "qa"


def test_authorization_header_roundtrip():
    req = Request()

    req.add_authorization("Bearer abc")
    assert req.headers["Authorization"] == "Bearer abc"

    req.delete_authorization()
    assert "Authorization" not in req.headers

    req.delete_authorization()


def test_params_keep_their_scalar_types():
    req = Request(params={"s": "x", "i": 1, "f": 1.5, "b": True, "n": None})

    assert req.params == {"s": "x", "i": 1, "f": 1.5, "b": True, "n": None}
    assert req.params["b"] is True


def test_request_str_pretty_prints_json_body():
    text = str(_full_request())

    assert text.startswith("---- Request ----\nMethod(verb): POST\n")
    assert "Path:         /users" in text
    assert '"name": "Ann"' in text
    assert "Headers:      \n  X-A:1" in text
    assert "Version:      /v1" in text


def test_request_str_keeps_invalid_json_body_verbatim():
    req = Request(body="not json", content_type="application/json")

    text = str(req)

    assert "Body:\nnot json\n" in text
    assert "Headers:      none" in text


def test_request_str_without_content_type():
    text = str(Request(body="raw"))

    assert "Content-Type: null" in text
    assert "Body:\nraw\n" in text


def test_response_from_transport_last_header_wins():
    resp = Response.from_transport(200, "ok", [("Set-Cookie", "a=1"), ("Set-Cookie", "b=2")])

    assert resp.headers == {"Set-Cookie": "b=2"}
    assert resp.status_code == 200
    assert resp.body == "ok"


def test_response_is_frozen():
    resp = Response(status_code=200, body="x")

    with pytest.raises(ValidationError):
        resp.status_code = 500


def test_response_str_pretty_prints_only_exact_json_content_type():
    body = '{"a":1}'
    as_json = Response(status_code=200, body=body, headers={"Content-Type": "application/json"})
    with_charset = Response(
        status_code=200, body=body, headers={"Content-Type": "application/json; charset=utf-8"}
    )

    assert '{\n  "a": 1\n}' in str(as_json)
    assert "Body:\n{\"a\":1}\n" in str(with_charset)
    assert str(as_json).startswith("----Response----\nStatus code: 200\n")


def test_response_header_lookup_is_case_insensitive():
    resp = Response(status_code=200, headers={"content-type": "text/plain"})

    assert resp.header("Content-Type") == "text/plain"
    assert resp.header("X-Missing") is None


class _User(BaseModel):
    name: str
    age: int


def test_response_resource_maps_body_to_model():
    resp = Response(status_code=200, body='{"name": "Ann", "age": 30}')

    user = resp.resource(_User)

    assert user == _User(name="Ann", age=30)
    assert resp.resource(dict) == {"name": "Ann", "age": 30}


def test_response_json_on_invalid_body_raises_parse_error():
    with pytest.raises(ParseError):
        Response(status_code=200, body="<html>").json()


def test_response_accepts_non_standard_status_code():
    assert Response.from_transport(999, "", []).status_code == 999
