"""Input validation errors.

Transport and backend errors (``redis.exceptions``, ``sqlalchemy.exc``) are
never wrapped and reach the caller as-is.
"""


class InvalidTagError(ValueError):
    """A cache tag is empty or contains whitespace."""


class InvalidQueryIdError(ValueError):
    """A query id is empty."""


class InvalidTableNameError(ValueError):
    """A table identifier does not match the allowed grammar."""


class InvalidWebhookError(ValueError):
    """A webhook payload is not a cache tag invalidation."""
