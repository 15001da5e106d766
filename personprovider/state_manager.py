# personprovider/state_manager.py
import logging
import threading
from typing import Any, Dict, List, Optional

from .exceptions import RollbackError
from .schema import Provider, ResourceData

log = logging.getLogger(__name__)

class ResourceManager:
    """
    Drives a provider's lifecycle handlers, tracks created resources and
    enables safe rollback.
    Resources are stored as: {type: [{id, data}]}
    """
    def __init__(self, provider: Provider, config: Optional[Dict[str, Any]] = None):
        self._provider = provider
        self._provider.configure(config)
        self._resources: Dict[str, List[Dict]] = {}
        self._order: List[tuple] = []
        self._lock = threading.Lock()

    @property
    def provider(self) -> Provider:
        return self._provider

    def _existing(self, resource_type: str, resource_id: str,
                  values: Optional[Dict[str, Any]] = None) -> ResourceData:
        resource = self._provider.resource(resource_type)
        return resource.data(values, id=resource_id)

    def create(self, resource_type: str, values: Dict[str, Any]) -> ResourceData:
        """Create resource via its handler, store for rollback"""
        resource = self._provider.resource(resource_type)
        data = resource.data(values)
        resource.create(data, self._provider.meta)
        with self._lock:
            self._resources.setdefault(resource_type, []).append({
                "id": data.id,
                "data": data.state()
            })
            self._order.append((resource_type, data.id))
        return data

    def read(self, resource_type: str, resource_id: str) -> ResourceData:
        data = self._existing(resource_type, resource_id)
        self._provider.resource(resource_type).read(data, self._provider.meta)
        self._track(resource_type, data)
        return data

    def update(self, resource_type: str, resource_id: str, values: Dict[str, Any]) -> ResourceData:
        data = self._existing(resource_type, resource_id, values)
        self._provider.resource(resource_type).update(data, self._provider.meta)
        self._track(resource_type, data)
        return data

    def delete(self, resource_type: str, resource_id: str):
        data = self._existing(resource_type, resource_id)
        self._provider.resource(resource_type).delete(data, self._provider.meta)
        self._untrack(resource_type, resource_id)

    def _track(self, resource_type: str, data: ResourceData):
        """Refresh the stored state of an already tracked resource"""
        with self._lock:
            for item in self._resources.get(resource_type, []):
                if item["id"] == data.id:
                    item["data"] = data.state()

    def _untrack(self, resource_type: str, resource_id: str):
        with self._lock:
            items = self._resources.get(resource_type, [])
            self._resources[resource_type] = [item for item in items if item["id"] != resource_id]
            if not self._resources[resource_type]:
                del self._resources[resource_type]
            self._order = [key for key in self._order if key != (resource_type, resource_id)]

    def rollback(self):
        """Rollback in reverse creation order (LIFO)"""
        with self._lock:
            deletion_order = list(reversed(self._order))

        errors = []
        for res_type, res_id in deletion_order:
            try:
                self.delete(res_type, res_id)
            except Exception as e:
                log.error("Rollback failed to delete %s %s: %s", res_type, res_id, e)
                errors.append(f"Failed to delete {res_type} {res_id}: {e}")

        if errors:
            raise RollbackError("Rollback incomplete:\n" + "\n".join(errors))

    def get_resources(self, resource_type: Optional[str] = None):
        """Get tracked resources, optionally filtered by type"""
        with self._lock:
            if resource_type:
                return list(self._resources.get(resource_type, []))
            return {key: list(items) for key, items in self._resources.items()}

    def clear_resources(self):
        """Clear all tracked resources without deletion (use with caution)"""
        with self._lock:
            self._resources.clear()
            self._order.clear()
