# personprovider/cli.py
import json
import logging
from typing import Optional

import typer
from pydantic import ValidationError

from personprovider.config import get_settings
from personprovider.exceptions import ProviderError
from personprovider.provider import provider
from personprovider.schema import ResourceData
from personprovider.state_manager import ResourceManager

RESOURCE_TYPE = "person_person"

app = typer.Typer(
    name="person-provider",
    help="Manage person resources through the Person REST API",
    no_args_is_help=True,
)


def setup(url: Optional[str], port: Optional[str]) -> ResourceManager:
    """Configure logging and the provider."""
    try:
        settings = get_settings()
    except ValidationError as ex:
        raise ProviderError(f"Invalid PERSON_* settings: {ex}") from ex
    logging.basicConfig(level=settings.log_level)

    config = settings.provider_config()
    if url is not None:
        config["person_service_url"] = url
    if port is not None:
        config["person_service_port"] = port
    return ResourceManager(provider(), config)


def show(data: ResourceData):
    typer.echo(json.dumps(data.state(), indent=2, sort_keys=True))


def fail(ex: ProviderError):
    typer.echo(f"Error: {ex}", err=True)
    raise typer.Exit(1)


def field_values(name, address, email, mobile_number) -> dict:
    values = {
        "name": name,
        "address": address,
        "email": email,
        "mobile_number": mobile_number,
    }
    return {key: value for key, value in values.items() if value is not None}


URL_OPTION = typer.Option(None, "--url", help="Person API service url (default: PERSON_SERVICE_URL)")
PORT_OPTION = typer.Option(None, "--port", help="Person API service port (default: PERSON_SERVICE_PORT)")


@app.command("create")
def create(
    name: Optional[str] = typer.Option(None, help="Person name"),
    address: Optional[str] = typer.Option(None, help="Postal address"),
    email: Optional[str] = typer.Option(None, help="Email address"),
    mobile_number: Optional[str] = typer.Option(None, help="Mobile number"),
    url: Optional[str] = URL_OPTION,
    port: Optional[str] = PORT_OPTION,
):
    """Create a person."""
    try:
        rm = setup(url, port)
        show(rm.create(RESOURCE_TYPE, field_values(name, address, email, mobile_number)))
    except ProviderError as ex:
        fail(ex)


@app.command("read")
def read(
    person_id: str = typer.Argument(..., help="Person id"),
    url: Optional[str] = URL_OPTION,
    port: Optional[str] = PORT_OPTION,
):
    """Show a person."""
    try:
        rm = setup(url, port)
        show(rm.read(RESOURCE_TYPE, person_id))
    except ProviderError as ex:
        fail(ex)


@app.command("update")
def update(
    person_id: str = typer.Argument(..., help="Person id"),
    name: Optional[str] = typer.Option(None, help="Person name"),
    address: Optional[str] = typer.Option(None, help="Postal address"),
    email: Optional[str] = typer.Option(None, help="Email address"),
    mobile_number: Optional[str] = typer.Option(None, help="Mobile number"),
    url: Optional[str] = URL_OPTION,
    port: Optional[str] = PORT_OPTION,
):
    """Replace a person's fields; fields not given are cleared."""
    try:
        rm = setup(url, port)
        show(rm.update(RESOURCE_TYPE, person_id, field_values(name, address, email, mobile_number)))
    except ProviderError as ex:
        fail(ex)


@app.command("delete")
def delete(
    person_id: str = typer.Argument(..., help="Person id"),
    url: Optional[str] = URL_OPTION,
    port: Optional[str] = PORT_OPTION,
):
    """Delete a person."""
    try:
        rm = setup(url, port)
        rm.delete(RESOURCE_TYPE, person_id)
    except ProviderError as ex:
        fail(ex)
    typer.echo(f"Deleted person {person_id}")
