# personprovider/provider.py
import logging

from .adapters import PersonSession
from .resource_person import resource_person
from .schema import Provider, ResourceData, Schema, TypeString

log = logging.getLogger(__name__)

def provider() -> Provider:
    """Declare the person provider: its configuration and the resources it serves"""
    return Provider(
        schema={
            "person_service_url": Schema(TypeString, optional=True,
                                         description="Person API service url."),
            "person_service_port": Schema(TypeString, optional=True,
                                          description="Person API service port."),
        },
        resources_map={
            "person_person": resource_person(),
        },
        configure_func=configure_provider,
    )

def configure_provider(data: ResourceData) -> PersonSession:
    service_url = data.get("person_service_url")
    service_port = data.get("person_service_port")
    session = PersonSession(f"{service_url}:{service_port}")
    log.info("Person session created for service url %s and port %s", service_url, service_port)
    return session
