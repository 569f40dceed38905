"""Client aggregate — a registered customer.

Orders may reference a client, or be placed anonymously.
"""

import re

from protean import atomic_change, invariant
from protean.fields import DateTime, String

from shared.domain import quickbite, utcnow
from shared.errors import ValidationError

_CPF = re.compile(r"^\d{11}$")
_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@quickbite.aggregate
class Client:
    cpf = String(required=True, max_length=11, unique=True)
    name = String(required=True, max_length=255)
    email = String(required=True, max_length=255, unique=True)
    created_at = DateTime(default=utcnow)
    updated_at = DateTime()

    @invariant.post
    def cpf_must_be_eleven_digits(self):
        if not _CPF.match(self.cpf or ""):
            raise ValidationError({"cpf": ["CPF must be exactly 11 digits"]})

    @invariant.post
    def email_must_be_well_formed(self):
        if not _EMAIL.match(self.email or ""):
            raise ValidationError({"email": [f"Invalid email address: {self.email!r}"]})

    @classmethod
    def register(cls, cpf, name, email):
        return cls(cpf=cpf, name=name, email=email)

    def change_details(self, name=None, email=None):
        with atomic_change(self):
            if name is not None:
                self.name = name
            if email is not None:
                self.email = email
            self.updated_at = utcnow()
