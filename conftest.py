# conftest.py - shared fixtures: an in-memory Person REST API

import json
import threading
from http import HTTPStatus
from urllib.parse import urlsplit

import pytest
import requests

class FakePersonService:
    """
    Stands in for the Person REST API by replacing requests.Session.send.
    People are kept in a dict; ids are assigned from a counter and returned
    as JSON numbers.
    """
    def __init__(self):
        self.people = {}
        self.next_id = 1
        self.requests = []       # (PreparedRequest, send kwargs)
        self.responses = []      # queued (status, body) overrides
        self.error = None        # exception to raise instead of responding
        self._lock = threading.Lock()

    def queue(self, status: int, body=None):
        """Make the next request answer with the given status and body"""
        self.responses.append((status, body))

    def send(self, session, request, **kwargs):
        with self._lock:
            self.requests.append((request, kwargs))
            if self.error is not None:
                raise self.error
            if self.responses:
                status, body = self.responses.pop(0)
                return self._response(request, status, body)
            return self._route(request)

    @property
    def last_request(self):
        return self.requests[-1][0]

    def last_body(self):
        body = self.last_request.body
        return json.loads(body) if body else None

    def _route(self, request):
        path = urlsplit(request.url).path.rstrip("/")
        parts = path.split("/")
        if parts[1:3] != ["api", "person"]:
            return self._response(request, 404, {"code": 404, "message": f"no route for {path}"})

        body = json.loads(request.body) if request.body else None
        if len(parts) == 3 and request.method == "POST":
            person = dict(body, person_id=self.next_id)
            self.people[self.next_id] = person
            self.next_id += 1
            return self._response(request, 201, person)

        if len(parts) != 4 or not parts[3].isdigit():
            return self._response(request, 405, {"code": 405, "message": "method not allowed"})
        person_id = int(parts[3])
        if person_id not in self.people:
            return self._response(request, 404, {"code": 404, "message": f"person {person_id} not found"})

        if request.method == "GET":
            return self._response(request, 200, self.people[person_id])
        if request.method == "PUT":
            self.people[person_id] = dict(body, person_id=person_id)
            return self._response(request, 200, self.people[person_id])
        if request.method == "DELETE":
            del self.people[person_id]
            return self._response(request, 204)
        return self._response(request, 405, {"code": 405, "message": "method not allowed"})

    def _response(self, request, status: int, body=None):
        resp = requests.Response()
        resp.status_code = status
        resp.reason = HTTPStatus(status).phrase
        resp.url = request.url
        resp.request = request
        resp.encoding = "utf-8"
        if body is None:
            resp._content = b""
        elif isinstance(body, (bytes, str)):
            resp._content = body.encode("utf-8") if isinstance(body, str) else body
        else:
            resp._content = json.dumps(body).encode("utf-8")
            resp.headers["Content-Type"] = "application/json"
        return resp

@pytest.fixture
def person_service(monkeypatch):
    service = FakePersonService()

    def fake_send(session, request, **kwargs):
        return service.send(session, request, **kwargs)

    monkeypatch.setattr(requests.Session, "send", fake_send)
    return service
