# personprovider/schema.py
"""
Declarations the provider plugs into: field schemas, per-instance field
state, resources and the provider itself.
"""
from typing import Any, Callable, Dict, Optional

from .exceptions import ProviderError, SchemaError

TypeString = "string"

class Schema:
    """Declaration of a single field"""
    def __init__(self, type: str = TypeString, optional: bool = False, required: bool = False,
                 computed: bool = False, description: str = ""):
        if type != TypeString:
            raise SchemaError(f"Unsupported field type: {type}")
        self.type = type
        self.optional = optional
        self.required = required
        self.computed = computed
        self.description = description

    def __repr__(self):
        flags = [name for name in ("optional", "required", "computed") if getattr(self, name)]
        return f"Schema({self.type}, {', '.join(flags)})"

def _validate_config(schema: Dict[str, Schema], values: Dict[str, Any], what: str):
    for key, value in values.items():
        if key not in schema:
            raise SchemaError(f"{what}: unknown field '{key}'")
        if schema[key].computed and not (schema[key].optional or schema[key].required):
            raise SchemaError(f"{what}: field '{key}' is computed and cannot be set")
        if value is not None and not isinstance(value, str):
            raise SchemaError(f"{what}: field '{key}' must be a string, got {type(value).__name__}")
    missing = [key for key, field in schema.items() if field.required and not values.get(key)]
    if missing:
        raise SchemaError(f"{what}: missing required field(s): {', '.join(missing)}")

class ResourceData:
    """Field values and identity of one resource instance"""
    def __init__(self, schema: Dict[str, Schema], values: Optional[Dict[str, Any]] = None,
                 id: Optional[str] = None):
        self._schema = schema
        self._values: Dict[str, str] = {}
        self._id = id or ""
        for key, value in (values or {}).items():
            self.set(key, value)

    @property
    def id(self) -> str:
        return self._id

    def set_id(self, id: str):
        self._id = id or ""

    def get(self, key: str) -> str:
        """Return the field value, or "" when unset"""
        if key not in self._schema:
            raise SchemaError(f"unknown field '{key}'")
        return self._values.get(key, "")

    def set(self, key: str, value: Any):
        if key not in self._schema:
            raise SchemaError(f"unknown field '{key}'")
        if value is None:
            value = ""
        if not isinstance(value, str):
            raise SchemaError(f"field '{key}' must be a string, got {type(value).__name__}")
        self._values[key] = value

    def state(self) -> Dict[str, str]:
        out = {key: self._values.get(key, "") for key in self._schema}
        out["id"] = self._id
        return out

class Resource:
    """A resource type: its schema and its four lifecycle handlers"""
    def __init__(self, schema: Dict[str, Schema], create: Callable, read: Callable,
                 update: Callable, delete: Callable, id_field: Optional[str] = None):
        self.schema = schema
        self.id_field = id_field
        self.create = create
        self.read = read
        self.update = update
        self.delete = delete

    def data(self, values: Optional[Dict[str, Any]] = None, id: Optional[str] = None) -> ResourceData:
        """Build instance state from caller-supplied configuration"""
        values = values or {}
        _validate_config(self.schema, values, "resource")
        data = ResourceData(self.schema, values, id=id)
        if id and self.id_field:
            data.set(self.id_field, id)
        return data

class Provider:
    """
    A provider: its configuration schema, the resource types it serves and
    the function that turns its configuration into the object shared by all
    handlers (the "meta").
    """
    def __init__(self, schema: Dict[str, Schema], resources_map: Dict[str, Resource],
                 configure_func: Callable[[ResourceData], Any]):
        self.schema = schema
        self.resources_map = resources_map
        self.configure_func = configure_func
        self._meta = None
        self._configured = False

    def configure(self, config: Optional[Dict[str, Any]] = None):
        if self._configured:
            raise ProviderError("Provider is already configured")
        config = config or {}
        _validate_config(self.schema, config, "provider")
        self._meta = self.configure_func(ResourceData(self.schema, config))
        self._configured = True
        return self._meta

    @property
    def configured(self) -> bool:
        return self._configured

    @property
    def meta(self):
        if not self._configured:
            raise ProviderError("Provider has not been configured")
        return self._meta

    def resource(self, resource_type: str) -> Resource:
        try:
            return self.resources_map[resource_type]
        except KeyError:
            raise ProviderError(f"Unsupported resource type: {resource_type}") from None
