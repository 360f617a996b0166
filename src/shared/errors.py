"""Error taxonomy shared by the notification pipeline."""


class NotificationError(Exception):
    """Base class for every failure that must fail the invocation."""

    pass


class ConfigurationError(NotificationError):
    """Missing or invalid settings in the execution environment."""

    pass


class UpstreamError(NotificationError):
    """Stripe API or secret backend call failed or returned nothing usable."""

    pass


class PublishError(NotificationError):
    """SNS publish failed."""

    pass


class NotFoundError(NotificationError):
    """Named field absent from a JSON secret."""

    pass
