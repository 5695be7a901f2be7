from . import db
from .base import RecordMixin


class Apartment(RecordMixin, db.Model):
    __tablename__ = "apartments"

    id = db.Column(db.Integer, primary_key=True)
    street = db.Column(db.String(255), nullable=False)
    number = db.Column(db.String(32), nullable=False)
    apartment_number = db.Column(db.String(32), nullable=False)
    floor = db.Column(db.String(32), nullable=False)
    postal_code = db.Column(db.String(20), nullable=False)
    city = db.Column(db.String(100), nullable=False)

    # Plain column: tenants.apartment_id already points the other way and a
    # second foreign key would make the two tables a cycle.
    tenant_id = db.Column(db.Integer, nullable=True, index=True)

    __api_fields__ = {
        "street": "street",
        "number": "number",
        "apartmentNumber": "apartment_number",
        "floor": "floor",
        "postalCode": "postal_code",
        "city": "city",
        "tenantId": "tenant_id",
    }

    def __repr__(self):
        return f"<Apartment {self.id}: {self.street} {self.number}, {self.apartment_number}>"
