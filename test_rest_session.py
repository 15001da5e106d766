# test_rest_session.py - PersonSession against an in-memory backend

import json

import pytest
import requests

from personprovider.adapters import PersonSession, DEFAULT_API_TIMEOUT
from personprovider.exceptions import PersonError, PersonDecodeError, ResourceNotFoundError
from personprovider.models import PersonRecord

@pytest.fixture
def session():
    return PersonSession("localhost:8000")

def test_session_construction(session):
    assert session.host == "localhost:8000"
    assert session.prefix == "http://localhost:8000/"
    assert session.timeout == DEFAULT_API_TIMEOUT == 60
    assert session.insecure is True
    assert session._client.verify is False

def test_session_configuration_is_read_only(session):
    with pytest.raises(AttributeError):
        session.prefix = "http://elsewhere/"

def test_timeout_override():
    assert PersonSession("localhost:8000", timeout=5).timeout == 5
    assert PersonSession("localhost:8000", insecure=False)._client.verify is True

def test_post_sends_json_and_decodes_response(session, person_service):
    result = session.post("api/person", {"name": "Ada"})

    request, kwargs = person_service.requests[-1]
    assert request.method == "POST"
    assert request.url == "http://localhost:8000/api/person"
    assert request.headers["Content-Type"] == "application/json"
    assert json.loads(request.body) == {"name": "Ada"}
    assert kwargs["timeout"] == 60
    assert result == {"name": "Ada", "person_id": 1}

def test_get_without_payload_has_no_body(session, person_service):
    person_service.people[7] = {"person_id": 7, "name": "Grace"}
    result = session.get("api/person/7", model=PersonRecord)

    assert person_service.last_request.body is None
    assert person_service.last_request.headers["Content-Type"] == "application/json"
    assert isinstance(result, PersonRecord)
    assert result.identity == "7"
    assert result.name == "Grace"

def test_put_replaces(session, person_service):
    person_service.people[3] = {"person_id": 3, "name": "Old"}
    result = session.put("api/person/3", {"name": "New"})
    assert result == {"name": "New", "person_id": 3}
    assert person_service.last_request.method == "PUT"

def test_patch_wraps_payload_in_operation(session, person_service):
    person_service.queue(200, {"person_id": 1, "name": "X"})
    session.patch("api/person/1", {"name": "X"}, "replace")

    assert person_service.last_request.method == "PATCH"
    assert person_service.last_body() == {"replace": {"name": "X"}}

def test_patch_rejects_unknown_operation(session, person_service):
    with pytest.raises(ValueError):
        session.patch("api/person/1", {"name": "X"}, "merge")
    assert person_service.requests == []

def test_delete_without_body(session, person_service):
    person_service.people[2] = {"person_id": 2}
    assert session.delete("api/person/2") is None
    assert person_service.last_request.method == "DELETE"
    assert person_service.last_request.body is None
    assert 2 not in person_service.people

def test_delete_with_payload_and_response(session, person_service):
    person_service.queue(200, {"deleted": [1, 2]})
    result = session.delete("api/person", {"ids": [1, 2]})
    assert person_service.last_body() == {"ids": [1, 2]}
    assert result == {"deleted": [1, 2]}

def test_204_is_success_without_decode(session, person_service):
    person_service.queue(204, "this is not json")
    assert session.get("api/person/1", model=PersonRecord) is None

def test_404_raises_not_found_with_status(session, person_service):
    with pytest.raises(ResourceNotFoundError) as exc_info:
        session.get("api/person/99")

    err = exc_info.value
    assert isinstance(err, PersonError)
    assert err.http_status == 404
    assert err.verb == "GET"
    assert err.url == "http://localhost:8000/api/person/99"
    assert err.message == "person 99 not found"
    assert err.code == 404
    assert "404" in str(err)
    assert str(err) == ("Encountered an error on GET request to URL "
                        "http://localhost:8000/api/person/99: "
                        "HTTP code: 404; error from Person: person 99 not found")

def test_server_error_without_message_renders_payload(session, person_service):
    person_service.queue(500, {"detail": "boom", "trace": "x"})
    with pytest.raises(PersonError) as exc_info:
        session.post("api/person", {"name": "Ada"})

    assert exc_info.value.http_status == 500
    assert exc_info.value.message == '{"detail": "boom", "trace": "x"}'
    assert not isinstance(exc_info.value, ResourceNotFoundError)

def test_server_error_with_text_body(session, person_service):
    person_service.queue(502, "<html>bad gateway</html>")
    with pytest.raises(PersonError) as exc_info:
        session.get("api/person/1")
    assert exc_info.value.message == "<html>bad gateway</html>"

def test_server_error_with_empty_body_carries_status_line(session, person_service):
    person_service.queue(503)
    with pytest.raises(PersonError) as exc_info:
        session.get("api/person/1")

    assert exc_info.value.message == "503 Service Unavailable"
    assert "HTTP code: 503" in str(exc_info.value)

def test_invalid_json_is_a_decode_error(session, person_service):
    person_service.queue(200, "{not json")
    with pytest.raises(PersonDecodeError) as exc_info:
        session.get("api/person/1")
    assert exc_info.value.cause is not None
    assert "error:" in str(exc_info.value)

def test_shape_mismatch_is_a_decode_error(session, person_service):
    person_service.queue(200, {"person_id": "forty-two"})
    with pytest.raises(PersonDecodeError):
        session.get("api/person/1", model=PersonRecord)

def test_transport_error_is_not_retried(session, person_service, caplog):
    person_service.error = requests.exceptions.ConnectTimeout("timed out")

    with caplog.at_level("INFO", logger="personprovider"):
        with pytest.raises(PersonError) as exc_info:
            session.post("api/person", {"name": "Ada"})

    assert isinstance(exc_info.value.cause, requests.exceptions.ConnectTimeout)
    assert exc_info.value.http_status is None
    assert len(person_service.requests) == 1
    assert "Client error for URL http://localhost:8000/api/person" in caplog.text
    assert '{"name": "Ada"}' in caplog.text

def test_unencodable_payload(session, person_service):
    with pytest.raises(PersonError) as exc_info:
        session.post("api/person", {"name": object()})
    assert isinstance(exc_info.value.cause, TypeError)
    assert person_service.requests == []

def test_bad_host_fails_request_construction(person_service):
    with pytest.raises(PersonError) as exc_info:
        PersonSession(":").get("api/person/1")
    assert "request construction failed" in str(exc_info.value)
    assert person_service.requests == []

def test_each_request_is_logged(session, person_service, caplog):
    with caplog.at_level("INFO", logger="personprovider"):
        session.post("api/person", {"name": "Ada"})
    assert "Request POST with url http://localhost:8000/api/person" in caplog.text

def test_rest_request_returns_raw_response(session, person_service):
    person_service.people[4] = {"person_id": 4}
    resp = session.rest_request("GET", "api/person/4")
    assert isinstance(resp, requests.Response)
    assert resp.status_code == 200
    assert resp.headers["Content-Type"] == "application/json"

    with pytest.raises(ResourceNotFoundError):
        session.rest_request("GET", "api/person/5")
