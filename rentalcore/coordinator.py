"""Keeps the tenant/apartment/key references consistent across writes.

Apartments and tenants point at each other (``apartment.tenantId`` and
``tenant.apartmentId``); keys point at either. Storage does not enforce any of
this, so every write that can break a link goes through :class:`Coordinator`.

By default only apartment-side writes repair the tenant back-reference, which
is how the records were always maintained: saving a tenant with an
``apartmentId`` leaves the apartment untouched. ``symmetric=True`` makes
tenant writes repair the apartment side as well. Deletions always clear every
reference to the deleted record.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

from .errors import NotFoundError, PartialConsistencyFailure
from .store import Store, same_id

logger = logging.getLogger(__name__)


@dataclass
class _Steps:
    operation: str
    completed: list[str] = field(default_factory=list)

    def done(self, description: str) -> None:
        logger.debug("%s: %s", self.operation, description)
        self.completed.append(description)


class Coordinator:
    def __init__(self, store: Store, symmetric: bool = False) -> None:
        self.store = store
        self.symmetric = symmetric

    @contextmanager
    def _operation(self, name: str) -> Iterator[_Steps]:
        steps = _Steps(name)
        try:
            with self.store.transaction():
                yield steps
        except Exception as e:
            if self.store.atomic or not steps.completed:
                raise
            logger.warning("%s left partial writes: %s", name, "; ".join(steps.completed))
            raise PartialConsistencyFailure(name, steps.completed, e) from e

    # -- reads ----------------------------------------------------------------
    def get(self, collection: str, record_id: Any) -> dict:
        return self.store.collection(collection).get(record_id)

    def list(self, collection: str, filter: Optional[dict] = None) -> list[dict]:
        return self.store.collection(collection).list(filter)

    def tenants_for_key(self, key_id: Any) -> list[dict]:
        key = self._find("keys", key_id) or {}
        tenant = self._find("tenants", key.get("tenantId"))
        return [tenant] if tenant else []

    def apartments_for_key(self, key_id: Any) -> list[dict]:
        key = self._find("keys", key_id) or {}
        apartment = self._find("apartments", key.get("apartmentId"))
        return [apartment] if apartment else []

    def summary(self) -> dict:
        apartments = self.store.apartments.list()
        return {
            "tenants": self.store.tenants.count(),
            "apartments": len(apartments),
            "keys": self.store.keys.count(),
            "vacantApartments": sum(1 for a in apartments if a.get("tenantId") is None),
        }

    # -- link primitives --------------------------------------------------------
    def _set_tenant_apartment(self, tenant: dict, apartment_id: Any, steps: _Steps) -> dict:
        tenant = dict(tenant, apartmentId=apartment_id)
        tenant = self.store.tenants.update(tenant["id"], tenant)
        if apartment_id is None:
            steps.done(f"unlinked tenant {tenant['id']}")
        else:
            steps.done(f"linked tenant {tenant['id']} to apartment {apartment_id}")
        return tenant

    def _set_apartment_tenant(self, apartment: dict, tenant_id: Any, steps: _Steps) -> dict:
        apartment = dict(apartment, tenantId=tenant_id)
        apartment = self.store.apartments.update(apartment["id"], apartment)
        if tenant_id is None:
            steps.done(f"unlinked apartment {apartment['id']}")
        else:
            steps.done(f"linked apartment {apartment['id']} to tenant {tenant_id}")
        return apartment

    def _find(self, collection: str, record_id: Any) -> Optional[dict]:
        if record_id is None:
            return None
        try:
            return self.store.collection(collection).get(record_id)
        except NotFoundError:
            return None

    def _require(self, collection: str, record_id: Any) -> None:
        """NotFoundError unless a non-null ``record_id`` names a stored record."""
        if record_id is not None:
            self.store.collection(collection).get(record_id)

    def _unlink_tenant(self, tenant_id: Any, steps: _Steps) -> None:
        tenant = self._find("tenants", tenant_id)
        if tenant and tenant.get("apartmentId") is not None:
            self._set_tenant_apartment(tenant, None, steps)

    def _unlink_apartment(self, apartment_id: Any, steps: _Steps) -> None:
        apartment = self._find("apartments", apartment_id)
        if apartment and apartment.get("tenantId") is not None:
            self._set_apartment_tenant(apartment, None, steps)

    def _link(self, apartment_id: Any, tenant: dict, steps: _Steps) -> None:
        """Point ``tenant`` at the apartment.

        An apartment the tenant used to live in is released only when it
        still names this tenant.
        """
        previous = tenant.get("apartmentId")
        if same_id(previous, apartment_id):
            return
        if previous is not None:
            old = self._find("apartments", previous)
            if old and same_id(old.get("tenantId"), tenant["id"]):
                self._set_apartment_tenant(old, None, steps)
        self._set_tenant_apartment(tenant, apartment_id, steps)

    def _claim(self, apartment: dict, tenant_id: Any, steps: _Steps) -> None:
        """Make ``tenant_id`` the apartment's tenant, releasing the previous one."""
        previous = apartment.get("tenantId")
        if same_id(previous, tenant_id):
            return
        if previous is not None:
            old = self._find("tenants", previous)
            if old and same_id(old.get("apartmentId"), apartment["id"]):
                self._set_tenant_apartment(old, None, steps)
        self._set_apartment_tenant(apartment, tenant_id, steps)

    # -- apartments -------------------------------------------------------------
    def create_apartment(self, data: dict) -> dict:
        with self._operation("create_apartment") as steps:
            tenant = None
            if data.get("tenantId") is not None:
                tenant = self.store.tenants.get(data["tenantId"])
            apartment = self.store.apartments.insert(data)
            steps.done(f"inserted apartment {apartment['id']}")
            if tenant is not None:
                self._link(apartment["id"], tenant, steps)
            return apartment

    def update_apartment(self, apartment_id: Any, data: dict) -> dict:
        with self._operation("update_apartment") as steps:
            current = self.store.apartments.get(apartment_id)
            new_tenant_id = data.get("tenantId")
            if new_tenant_id is not None:
                self.store.tenants.get(new_tenant_id)

            old_tenant_id = current.get("tenantId")
            if old_tenant_id is not None and not same_id(old_tenant_id, new_tenant_id):
                self._unlink_tenant(old_tenant_id, steps)

            apartment = self.store.apartments.update(current["id"], data)
            steps.done(f"updated apartment {apartment['id']}")

            if new_tenant_id is not None:
                self._link(apartment["id"], self.store.tenants.get(new_tenant_id), steps)
            return apartment

    def delete_apartment(self, apartment_id: Any) -> None:
        with self._operation("delete_apartment") as steps:
            apartment = self._find("apartments", apartment_id)
            if apartment is None:
                return
            self._unlink_tenant(apartment.get("tenantId"), steps)
            for tenant in self.store.tenants.list({"apartmentId": apartment["id"]}):
                self._set_tenant_apartment(tenant, None, steps)
            for key in self.store.keys.list({"apartmentId": apartment["id"]}):
                self.store.keys.update(key["id"], dict(key, apartmentId=None))
                steps.done(f"unlinked key {key['id']}")
            self.store.apartments.delete(apartment["id"])
            steps.done(f"deleted apartment {apartment['id']}")

    # -- tenants ----------------------------------------------------------------
    def create_tenant(self, data: dict) -> dict:
        with self._operation("create_tenant") as steps:
            apartment_id = data.get("apartmentId")
            self._require("apartments", apartment_id)
            tenant = self.store.tenants.insert(data)
            steps.done(f"inserted tenant {tenant['id']}")
            if self.symmetric and apartment_id is not None:
                self._claim(self.store.apartments.get(apartment_id), tenant["id"], steps)
            return tenant

    def update_tenant(self, tenant_id: Any, data: dict) -> dict:
        with self._operation("update_tenant") as steps:
            current = self.store.tenants.get(tenant_id)
            new_apartment_id = data.get("apartmentId")
            self._require("apartments", new_apartment_id)

            old_apartment_id = current.get("apartmentId")
            if self.symmetric and old_apartment_id is not None and not same_id(old_apartment_id, new_apartment_id):
                self._unlink_apartment(old_apartment_id, steps)

            tenant = self.store.tenants.update(current["id"], data)
            steps.done(f"updated tenant {tenant['id']}")

            if self.symmetric and new_apartment_id is not None:
                self._claim(self.store.apartments.get(new_apartment_id), tenant["id"], steps)
            return tenant

    def delete_tenant(self, tenant_id: Any) -> None:
        with self._operation("delete_tenant") as steps:
            tenant = self._find("tenants", tenant_id)
            if tenant is None:
                return
            for key in self.store.keys.list({"tenantId": tenant["id"]}):
                self.store.keys.update(key["id"], dict(key, tenantId=None))
                steps.done(f"unlinked key {key['id']}")
            for apartment in self.store.apartments.list({"tenantId": tenant["id"]}):
                self._set_apartment_tenant(apartment, None, steps)
            self.store.tenants.delete(tenant["id"])
            steps.done(f"deleted tenant {tenant['id']}")

    # -- keys -------------------------------------------------------------------
    def _check_key_references(self, data: dict) -> None:
        self._require("apartments", data.get("apartmentId"))
        self._require("tenants", data.get("tenantId"))

    def create_key(self, data: dict) -> dict:
        self._check_key_references(data)
        return self.store.keys.insert(data)

    def update_key(self, key_id: Any, data: dict) -> dict:
        self.store.keys.get(key_id)
        self._check_key_references(data)
        return self.store.keys.update(key_id, data)

    def delete_key(self, key_id: Any) -> None:
        self.store.keys.delete(key_id)
