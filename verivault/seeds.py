"""
Seed data: runs once on app startup if the stores are empty.
"""
import logging

from verivault.models import Person, User

logger = logging.getLogger(__name__)

DEFAULT_USERS = [
    {"username": "admin", "password": "password", "role": "administrator", "pin": "1234"},
    {"username": "officer", "password": "officer123", "role": "officer", "pin": "5678"},
]

DEFAULT_PEOPLE = [
    {"first_name": "John", "last_name": "Smith", "type": "Staff", "department": "Security", "phone": "555-0101"},
    {"first_name": "Jane", "last_name": "Doe", "type": "Vendor", "company": "ABC Cleaning Services", "phone": "555-0102"},
    {"first_name": "Mike", "last_name": "Johnson", "type": "Guest", "company": "Tech Corp", "phone": "555-0103"},
    {"first_name": "Sarah", "last_name": "Williams", "type": "Vendor", "company": "Medical Supplies Inc", "phone": "555-0104"},
    {"first_name": "David", "last_name": "Brown", "type": "Staff", "department": "Administration", "phone": "555-0105"},
]


def seed_users(stores):
    if stores.users.count():
        return
    for data in DEFAULT_USERS:
        user = User(username=data["username"], role=data["role"])
        user.set_password(data["password"])
        user.set_pin(data["pin"])
        stores.users.add(user)
    logger.info(f"Seeded {len(DEFAULT_USERS)} users")


def seed_people(stores):
    if stores.people.count():
        return
    for data in DEFAULT_PEOPLE:
        stores.people.add(Person(added_by="system", **data))
    logger.info(f"Seeded {len(DEFAULT_PEOPLE)} people")


def seed_defaults(stores):
    """Seed default users and people if missing."""
    seed_users(stores)
    seed_people(stores)
