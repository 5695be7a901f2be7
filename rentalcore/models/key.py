from . import db
from .base import RecordMixin


class Key(RecordMixin, db.Model):
    __tablename__ = "keys"

    id = db.Column(db.Integer, primary_key=True)
    type = db.Column(db.String(64), nullable=False)
    number = db.Column(db.String(64), nullable=False)
    amount = db.Column(db.Integer, nullable=False, default=1)
    apartment_id = db.Column(db.Integer, db.ForeignKey("apartments.id"), nullable=True, index=True)
    tenant_id = db.Column(db.Integer, db.ForeignKey("tenants.id"), nullable=True, index=True)

    __api_fields__ = {
        "type": "type",
        "number": "number",
        "amount": "amount",
        "apartmentId": "apartment_id",
        "tenantId": "tenant_id",
    }

    def __repr__(self):
        return f"<Key {self.id}: {self.type} #{self.number} x{self.amount}>"
