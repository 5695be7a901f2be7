from . import db
from .base import RecordMixin


class Tenant(RecordMixin, db.Model):
    __tablename__ = "tenants"

    id = db.Column(db.Integer, primary_key=True)

    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    phone_number = db.Column(db.String(50), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    personal_number = db.Column(db.String(50), nullable=False)

    # Kept as text, the way the forms submit them (YYYY-MM-DD)
    move_in_date = db.Column(db.String(32), nullable=True)
    resiliation_date = db.Column(db.String(32), nullable=True)

    apartment_id = db.Column(db.Integer, db.ForeignKey("apartments.id"), nullable=True, index=True)

    __api_fields__ = {
        "firstName": "first_name",
        "lastName": "last_name",
        "phoneNumber": "phone_number",
        "email": "email",
        "personalNumber": "personal_number",
        "moveInDate": "move_in_date",
        "resiliationDate": "resiliation_date",
        "apartmentId": "apartment_id",
    }

    def __repr__(self):
        return f"<Tenant {self.id}: {self.first_name} {self.last_name}>"
