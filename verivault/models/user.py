from dataclasses import dataclass
from typing import Optional

from verivault.extensions import bcrypt
from verivault.utils.watermark import compute_pin_hash

from .base import RecordMixin


@dataclass
class User(RecordMixin):
    username: str
    role: str
    password_hash: str = ''
    pin: str = ''
    pin_hash: str = ''
    id: Optional[int] = None

    READ_ONLY_FIELDS = ('id', 'username', 'password_hash', 'pin', 'pin_hash')

    def set_password(self, password):
        """Hash and set password"""
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        """Check if provided password matches hash"""
        if not self.password_hash or not password:
            return False
        return bcrypt.check_password_hash(self.password_hash, password)

    def set_pin(self, pin):
        """Set the 4-digit PIN and its sha256 hash"""
        self.pin = pin
        self.pin_hash = compute_pin_hash(pin)

    def check_pin(self, pin):
        return bool(pin) and self.pin == str(pin)

    def has_any_role(self, *role_names):
        return self.role in role_names

    def to_dict(self):
        """Public view, no password or PIN material"""
        return {
            'id': self.id,
            'username': self.username,
            'role': self.role,
        }

    def __repr__(self):
        return f"<User {self.username} - {self.role}>"
