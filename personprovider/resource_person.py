# personprovider/resource_person.py
import logging
from typing import Dict

from .adapters import PersonSession
from .exceptions import PersonDecodeError
from .models import PERSON_FIELDS, PersonRecord
from .schema import Resource, ResourceData, Schema, TypeString

log = logging.getLogger(__name__)

PERSON_ENDPOINT = "api/person"

def resource_person_schema() -> Dict[str, Schema]:
    return {
        "person_id": Schema(TypeString, computed=True),
        "name": Schema(TypeString, optional=True),
        "address": Schema(TypeString, optional=True),
        "email": Schema(TypeString, optional=True),
        "mobile_number": Schema(TypeString, optional=True),
    }

def resource_person() -> Resource:
    return Resource(
        schema=resource_person_schema(),
        create=create_person,
        read=read_person,
        update=update_person,
        delete=delete_person,
        id_field="person_id",
    )

def _person_url(data: ResourceData) -> str:
    return f"{PERSON_ENDPOINT}/{data.get('person_id') or data.id}"

def _required(person, verb: str, session: PersonSession, uri: str) -> PersonRecord:
    """Fail on a success response that carried no person"""
    if person is None:
        raise PersonDecodeError(verb, session.prefix + uri, cause=ValueError("empty response body"))
    return person

def _store(data: ResourceData, person: PersonRecord):
    """Copy the server's view of a person into the instance state"""
    person_id = person.identity
    data.set_id(person_id)
    data.set("person_id", person_id)
    for field in PERSON_FIELDS:
        data.set(field, getattr(person, field))

def create_person(data: ResourceData, session: PersonSession):
    log.info("create_person")
    person = {field: data.get(field) for field in PERSON_FIELDS}

    created = _required(session.post(PERSON_ENDPOINT, person, model=PersonRecord),
                        "POST", session, PERSON_ENDPOINT)
    person_id = created.identity
    data.set_id(person_id)
    data.set("person_id", person_id)

def read_person(data: ResourceData, session: PersonSession):
    """Refresh identity and all fields from the server"""
    log.info("read_person")
    url = _person_url(data)
    _store(data, _required(session.get(url, model=PersonRecord), "GET", session, url))

def update_person(data: ResourceData, session: PersonSession):
    """Overlay the configured fields onto the server's current object and PUT it back"""
    log.info("update_person")
    url = _person_url(data)
    current = _required(session.get(url, model=PersonRecord), "GET", session, url)

    merged = current.model_dump()
    for field in PERSON_FIELDS:
        merged[field] = data.get(field)

    _store(data, _required(session.put(url, merged, model=PersonRecord), "PUT", session, url))

def delete_person(data: ResourceData, session: PersonSession):
    log.info("delete_person")
    session.delete(_person_url(data))
    data.set_id("")
