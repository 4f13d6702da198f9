"""
This module defines the session record types held by the Clinic Portal.

The records are references to entities owned by the clinic API. A record is
created from the body returned by a role's login endpoint and persisted in the
session store so that a dashboard can be restored on the next visit. The
client never validates tokens or expiry; a present record is a logged-in role.
"""
# clinic/models.py

ROLES = ('patient', 'staff', 'admin')


class SessionRecord:
    """Base class for the per-role session records.

    Attributes:
        record_id (str): The identifier of the logged-in account.
        first_name (str): The account holder's first name.
        last_name (str): The account holder's last name.
        email (str): The account's email address.
        phone (str): The account's phone number.
        extra (dict): Any additional profile fields returned by the API.
    """
    role = None
    id_field = None
    _known_fields = ('firstName', 'lastName', 'email', 'phone')

    def __init__(self, record_id, first_name=None, last_name=None, email=None, phone=None, extra=None):
        self.record_id = record_id
        self.first_name = first_name
        self.last_name = last_name
        self.email = email
        self.phone = phone
        self.extra = dict(extra or {})

    @property
    def full_name(self):
        """Returns the display name, falling back to the email address."""
        parts = [part for part in (self.first_name, self.last_name) if part]
        if parts:
            return ' '.join(parts)
        return self.email or str(self.record_id)

    @classmethod
    def from_dict(cls, data):
        """Builds a record from a stored or login-response dictionary.

        The login endpoints sometimes return `id` instead of the role-specific
        identifier field, so either is accepted.

        Args:
            data (dict): The session payload.

        Returns:
            SessionRecord: The parsed record.

        Raises:
            ValueError: If the payload is not a dictionary or has no identifier.
        """
        if not isinstance(data, dict):
            raise ValueError(f"{cls.role} session must be an object")
        record_id = data.get(cls.id_field) or data.get('id')
        if record_id in (None, ''):
            raise ValueError(f"{cls.role} session is missing '{cls.id_field}'")
        extra = {
            key: value for key, value in data.items()
            if key not in cls._known_fields and key not in (cls.id_field, 'id')
        }
        return cls(
            record_id=record_id,
            first_name=data.get('firstName'),
            last_name=data.get('lastName'),
            email=data.get('email'),
            phone=data.get('phone'),
            extra=extra,
        )

    def to_dict(self):
        """Serializes the record back to the API's field naming."""
        data = dict(self.extra)
        data[self.id_field] = self.record_id
        for key, value in (('firstName', self.first_name), ('lastName', self.last_name),
                           ('email', self.email), ('phone', self.phone)):
            if value is not None:
                data[key] = value
        return data

    def updated(self, changes):
        """Returns a copy of the record with profile changes applied."""
        merged = self.to_dict()
        merged.update(changes)
        return type(self).from_dict(merged)

    def __eq__(self, other):
        return type(self) is type(other) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"{type(self).__name__}({self.id_field}={self.record_id!r})"


class PatientSession(SessionRecord):
    """The session of a logged-in patient."""
    role = 'patient'
    id_field = 'patientId'


class StaffSession(SessionRecord):
    """The session of a logged-in staff member."""
    role = 'staff'
    id_field = 'staffId'


class AdminSession(SessionRecord):
    """The session of a logged-in administrator."""
    role = 'admin'
    id_field = 'adminId'


RECORD_TYPES = {
    'patient': PatientSession,
    'staff': StaffSession,
    'admin': AdminSession,
}


def record_type_for(role):
    """Returns the record class for a role, or raises KeyError for unknown roles."""
    return RECORD_TYPES[role]
