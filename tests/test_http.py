"""
HTTP helper tests.
"""

import httpx
import pytest

from nexavalid.http import RequestError, ResponseDecodeError, make_request
from nexavalid.validation import Field, Nested, Record, RecordTypeError, validate


class Address(Record):
    city = Field("required", name="city")


class User(Record):
    email = Field("required,email", name="email")
    password = Field("required,min:8,password", name="password")
    address = Nested(Address)


def client_for(handler):
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_sends_method_headers_and_body():
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["token"] = request.headers["X-Token"]
        seen["body"] = request.content
        return httpx.Response(201, json={"id": 7})

    with client_for(handler) as client:
        body, status = make_request(
            "https://api.test/users",
            "post",
            headers={"X-Token": "abc"},
            body=b'{"name":"neo"}',
            client=client,
        )

    assert (body, status) == ({"id": 7}, 201)
    assert seen == {"method": "POST", "token": "abc", "body": b'{"name":"neo"}'}


def test_binds_response_into_record_for_validation():
    def handler(request):
        return httpx.Response(
            200,
            json={"email": "not-an-email", "password": "Passwo1!", "address": {"city": ""}},
        )

    with client_for(handler) as client:
        user, status = make_request("https://api.test/users/1", client=client, response_type=User)

    assert status == 200
    assert user == User(email="not-an-email", password="Passwo1!", address=Address(city=""))
    assert validate(user) == [
        "Field 'email' is not a valid email",
        "Field 'city' is required",
    ]


def test_error_status_still_decodes():
    def handler(request):
        return httpx.Response(404, json={"error": "not found"})

    with client_for(handler) as client:
        assert make_request("https://api.test/missing", client=client) == ({"error": "not found"}, 404)


def test_non_json_body():
    def handler(request):
        return httpx.Response(502, content=b"<html>Bad Gateway</html>")

    with client_for(handler) as client:
        with pytest.raises(ResponseDecodeError) as exc_info:
            make_request("https://api.test/users", client=client)

    assert exc_info.value.status_code == 502


def test_json_of_the_wrong_shape():
    def handler(request):
        return httpx.Response(200, json=[1, 2, 3])

    with client_for(handler) as client:
        with pytest.raises(ResponseDecodeError):
            make_request("https://api.test/users", client=client, response_type=User)


def test_response_type_must_be_a_record():
    def handler(request):
        return httpx.Response(200, json={})

    with client_for(handler) as client:
        with pytest.raises(RecordTypeError):
            make_request("https://api.test/users", client=client, response_type=dict)


def test_transport_failure(log_records):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with client_for(handler) as client:
        with pytest.raises(RequestError) as exc_info:
            make_request("https://api.test/users", "GET", client=client)

    assert isinstance(exc_info.value.cause, httpx.ConnectError)
    assert log_records.messages() == ["Request failed"]
    assert log_records.records[0].context == {"method": "GET", "url": "https://api.test/users"}
