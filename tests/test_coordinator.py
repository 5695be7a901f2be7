"""
Tests for the referential integrity coordinator, run against both backends.
"""

import pytest

from conftest import apartment_data, key_data, tenant_data
from rentalcore.coordinator import Coordinator
from rentalcore.errors import NotFoundError, PartialConsistencyFailure


class TestApartmentWrites:
    def test_create_with_tenant_links_both_sides(self, coordinator, store, make_tenant):
        tenant = make_tenant()
        apartment = coordinator.create_apartment(apartment_data(tenantId=tenant["id"]))
        assert apartment["tenantId"] == tenant["id"]
        assert store.tenants.get(tenant["id"])["apartmentId"] == apartment["id"]

    def test_create_with_missing_tenant_writes_nothing(self, coordinator, store):
        with pytest.raises(NotFoundError):
            coordinator.create_apartment(apartment_data(tenantId=999999))
        assert store.apartments.count() == 0

    def test_update_sets_tenant_back_reference(self, coordinator, store, make_tenant, make_apartment):
        tenant = make_tenant()
        apartment = make_apartment()
        coordinator.update_apartment(apartment["id"], dict(apartment, tenantId=tenant["id"]))
        assert store.tenants.get(tenant["id"])["apartmentId"] == apartment["id"]

    def test_moving_apartment_to_new_tenant_unlinks_old(self, coordinator, store, make_tenant, make_apartment):
        t1, t2 = make_tenant(), make_tenant()
        apartment = make_apartment()
        coordinator.update_apartment(apartment["id"], dict(apartment, tenantId=t1["id"]))
        coordinator.update_apartment(apartment["id"], dict(apartment, tenantId=t2["id"]))

        assert store.tenants.get(t1["id"])["apartmentId"] is None
        assert store.tenants.get(t2["id"])["apartmentId"] == apartment["id"]
        assert store.apartments.get(apartment["id"])["tenantId"] == t2["id"]

    def test_clearing_tenant_unlinks_old(self, coordinator, store, make_tenant, make_apartment):
        tenant = make_tenant()
        apartment = make_apartment()
        coordinator.update_apartment(apartment["id"], dict(apartment, tenantId=tenant["id"]))
        coordinator.update_apartment(apartment["id"], dict(apartment, tenantId=None))

        assert store.tenants.get(tenant["id"])["apartmentId"] is None
        assert store.apartments.get(apartment["id"])["tenantId"] is None

    def test_tenant_moving_releases_previous_apartment(self, coordinator, store, make_tenant, make_apartment):
        tenant = make_tenant()
        a1, a2 = make_apartment(), make_apartment()
        coordinator.update_apartment(a1["id"], dict(a1, tenantId=tenant["id"]))
        coordinator.update_apartment(a2["id"], dict(a2, tenantId=tenant["id"]))

        assert store.apartments.get(a1["id"])["tenantId"] is None
        assert store.tenants.get(tenant["id"])["apartmentId"] == a2["id"]

    def test_update_missing_apartment(self, coordinator):
        with pytest.raises(NotFoundError):
            coordinator.update_apartment(999999, apartment_data())

    def test_delete_clears_every_reference(self, coordinator, store, make_tenant, make_apartment, make_key):
        tenant = make_tenant()
        apartment = make_apartment()
        coordinator.update_apartment(apartment["id"], dict(apartment, tenantId=tenant["id"]))
        key = make_key(apartmentId=apartment["id"])

        coordinator.delete_apartment(apartment["id"])

        assert store.keys.list({"apartmentId": apartment["id"]}) == []
        assert store.keys.get(key["id"])["apartmentId"] is None
        assert store.tenants.get(tenant["id"])["apartmentId"] is None
        with pytest.raises(NotFoundError):
            store.apartments.get(apartment["id"])

    def test_delete_clears_one_sided_tenant_links(self, coordinator, store, make_apartment, make_tenant):
        apartment = make_apartment()
        tenant = make_tenant(apartmentId=apartment["id"])
        coordinator.delete_apartment(apartment["id"])
        assert store.tenants.get(tenant["id"])["apartmentId"] is None

    def test_delete_absent_is_noop(self, coordinator, make_apartment):
        make_apartment()
        coordinator.delete_apartment(999999)


class TestTenantWritesAsymmetric:
    """Tenant-side writes leave apartments alone by default."""

    def test_create_with_apartment_leaves_apartment_unset(self, coordinator, store, make_apartment):
        apartment = make_apartment()
        tenant = coordinator.create_tenant(tenant_data(apartmentId=apartment["id"]))
        assert tenant["apartmentId"] == apartment["id"]
        assert store.apartments.get(apartment["id"])["tenantId"] is None

    def test_update_with_apartment_leaves_apartment_unset(self, coordinator, store, make_apartment, make_tenant):
        apartment = make_apartment()
        tenant = make_tenant()
        coordinator.update_tenant(tenant["id"], dict(tenant, apartmentId=apartment["id"]))
        assert store.apartments.get(apartment["id"])["tenantId"] is None

    def test_create_with_missing_apartment_writes_nothing(self, coordinator, store):
        with pytest.raises(NotFoundError):
            coordinator.create_tenant(tenant_data(apartmentId=999999))
        assert store.tenants.count() == 0

    def test_update_with_missing_apartment_writes_nothing(self, coordinator, store, make_tenant):
        tenant = make_tenant()
        with pytest.raises(NotFoundError):
            coordinator.update_tenant(tenant["id"], dict(tenant, apartmentId=999999, firstName="Eva"))
        stored = store.tenants.get(tenant["id"])
        assert stored["apartmentId"] is None
        assert stored["firstName"] == "Anna"

    def test_delete_clears_every_reference(self, coordinator, store, make_tenant, make_apartment, make_key):
        tenant = make_tenant()
        apartment = make_apartment()
        coordinator.update_apartment(apartment["id"], dict(apartment, tenantId=tenant["id"]))
        key = make_key(tenantId=tenant["id"], apartmentId=apartment["id"])

        coordinator.delete_tenant(tenant["id"])

        assert store.apartments.get(apartment["id"])["tenantId"] is None
        remaining = store.keys.get(key["id"])
        assert remaining["tenantId"] is None
        assert remaining["apartmentId"] == apartment["id"]
        with pytest.raises(NotFoundError):
            store.tenants.get(tenant["id"])


class TestTenantWritesSymmetric:
    @pytest.fixture
    def symmetric(self, store):
        return Coordinator(store, symmetric=True)

    def test_create_links_apartment(self, symmetric, store, make_apartment):
        apartment = make_apartment()
        tenant = symmetric.create_tenant(tenant_data(apartmentId=apartment["id"]))
        assert store.apartments.get(apartment["id"])["tenantId"] == tenant["id"]

    def test_create_displaces_previous_tenant(self, symmetric, store, make_apartment):
        apartment = make_apartment()
        t1 = symmetric.create_tenant(tenant_data(apartmentId=apartment["id"]))
        t2 = symmetric.create_tenant(tenant_data(apartmentId=apartment["id"]))
        assert store.tenants.get(t1["id"])["apartmentId"] is None
        assert store.apartments.get(apartment["id"])["tenantId"] == t2["id"]

    def test_update_moves_between_apartments(self, symmetric, store, make_apartment):
        a1, a2 = make_apartment(), make_apartment()
        tenant = symmetric.create_tenant(tenant_data(apartmentId=a1["id"]))
        symmetric.update_tenant(tenant["id"], dict(tenant, apartmentId=a2["id"]))
        assert store.apartments.get(a1["id"])["tenantId"] is None
        assert store.apartments.get(a2["id"])["tenantId"] == tenant["id"]

    def test_create_with_missing_apartment_writes_nothing(self, symmetric, store):
        with pytest.raises(NotFoundError):
            symmetric.create_tenant(tenant_data(apartmentId=999999))
        assert store.tenants.count() == 0


class TestKeys:
    def test_passthrough(self, coordinator, store, make_apartment):
        apartment = make_apartment()
        key = coordinator.create_key(key_data(apartmentId=apartment["id"]))
        key = coordinator.update_key(key["id"], dict(key, amount=5))
        assert store.keys.get(key["id"])["amount"] == 5
        coordinator.delete_key(key["id"])
        assert store.keys.count() == 0

    @pytest.mark.parametrize("refs", [{"apartmentId": 999999}, {"tenantId": 888888}])
    def test_create_with_missing_reference_writes_nothing(self, coordinator, store, refs):
        with pytest.raises(NotFoundError):
            coordinator.create_key(key_data(**refs))
        assert store.keys.count() == 0

    def test_update_with_missing_reference_keeps_key(self, coordinator, store, make_apartment, make_key):
        apartment = make_apartment()
        key = make_key(apartmentId=apartment["id"])
        with pytest.raises(NotFoundError):
            coordinator.update_key(key["id"], dict(key, tenantId=888888))
        assert store.keys.get(key["id"]) == key

    def test_update_missing_key(self, coordinator):
        with pytest.raises(NotFoundError):
            coordinator.update_key(999999, key_data())

    def test_lookups_by_key(self, coordinator, make_tenant, make_apartment, make_key):
        tenant, apartment = make_tenant(), make_apartment()
        key = make_key(tenantId=tenant["id"], apartmentId=apartment["id"])
        assert [t["id"] for t in coordinator.tenants_for_key(key["id"])] == [tenant["id"]]
        assert [a["id"] for a in coordinator.apartments_for_key(key["id"])] == [apartment["id"]]

    def test_lookups_by_missing_key(self, coordinator):
        assert coordinator.tenants_for_key(999999) == []
        assert coordinator.apartments_for_key(999999) == []


def test_summary(coordinator, make_tenant, make_apartment, make_key):
    tenant = make_tenant()
    occupied, _ = make_apartment(), make_apartment()
    coordinator.update_apartment(occupied["id"], dict(occupied, tenantId=tenant["id"]))
    make_key()
    assert coordinator.summary() == {"tenants": 1, "apartments": 2, "keys": 1, "vacantApartments": 1}


class TestPartialFailures:
    """A step failing halfway through a multi-step write."""

    @pytest.fixture
    def linked(self, coordinator, make_tenant, make_apartment):
        t1, t2 = make_tenant(), make_tenant()
        apartment = make_apartment()
        coordinator.update_apartment(apartment["id"], dict(apartment, tenantId=t1["id"]))
        return t1, t2, apartment

    @staticmethod
    def _break_apartment_updates(monkeypatch, store):
        def boom(record_id, record):
            raise RuntimeError("disk full")
        monkeypatch.setattr(store.apartments, "update", boom)

    def test_memory_store_reports_completed_steps(self, coordinator, store, linked, monkeypatch):
        if store.atomic:
            pytest.skip("embedded store only")
        t1, t2, apartment = linked
        self._break_apartment_updates(monkeypatch, store)

        with pytest.raises(PartialConsistencyFailure) as exc_info:
            coordinator.update_apartment(apartment["id"], dict(apartment, tenantId=t2["id"]))

        failure = exc_info.value
        assert failure.operation == "update_apartment"
        assert failure.completed == [f"unlinked tenant {t1['id']}"]
        assert isinstance(failure.__cause__, RuntimeError)
        assert failure.status_code == 500
        # the first step stays persisted
        assert store.tenants.get(t1["id"])["apartmentId"] is None

    def test_sql_store_rolls_back(self, coordinator, store, linked, monkeypatch):
        if not store.atomic:
            pytest.skip("relational store only")
        t1, t2, apartment = linked
        self._break_apartment_updates(monkeypatch, store)

        with pytest.raises(RuntimeError):
            coordinator.update_apartment(apartment["id"], dict(apartment, tenantId=t2["id"]))

        assert store.tenants.get(t1["id"])["apartmentId"] == apartment["id"]

    def test_failure_before_any_write_is_raised_as_is(self, coordinator, store, make_apartment):
        apartment = make_apartment()
        with pytest.raises(NotFoundError):
            coordinator.update_apartment(apartment["id"], dict(apartment, tenantId=999999))
        assert store.apartments.get(apartment["id"])["tenantId"] is None
