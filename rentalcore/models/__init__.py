from ..extensions import db

from .apartment import Apartment
from .key import Key
from .tenant import Tenant
from .user import User

MODELS = {
    "tenants": Tenant,
    "apartments": Apartment,
    "keys": Key,
    "users": User,
}
