# errors.py


class CareerMatcherError(Exception):
    """Base class for errors surfaced to callers."""


class DocumentUnavailable(CareerMatcherError):
    """The resume document could not be fetched or decoded."""


class CatalogUnavailable(CareerMatcherError):
    """The job catalog could not be read."""


class ProfileMissing(CareerMatcherError):
    """No profile exists for the requested user."""
