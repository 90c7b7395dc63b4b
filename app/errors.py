"""Domain errors raised by the services and translated by the API layer."""


class VaccinationRecordError(Exception):
    """Base class for all service errors."""


class InvalidCredentials(VaccinationRecordError):
    """Unknown username or wrong password.

    Both cases share this single error so callers cannot enumerate accounts.
    """


class MissingCredential(VaccinationRecordError):
    """No bearer credential on a protected request."""


class InvalidCredential(VaccinationRecordError):
    """Bearer credential is malformed, wrongly signed or expired."""


class RecordNotFound(VaccinationRecordError):
    """No patient record matches the given slug."""

    def __init__(self, slug: str):
        super().__init__(f"No patient record with slug {slug!r}")
        self.slug = slug


class PersistenceError(VaccinationRecordError):
    """Unexpected failure in the record store."""


class SlugExhausted(PersistenceError):
    """Gave up looking for an unused slug."""
