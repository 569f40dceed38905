from shared.errors import GatewayError


class GatewayAuthError(GatewayError):
    """The gateway refused or could not issue an access credential."""


class GatewayRequestError(GatewayError):
    """A gateway call failed or timed out; trying again later may succeed."""

    retriable = True


class UnknownGatewayStatus(GatewayError):
    def __init__(self, status: str) -> None:
        self.status = status
        super().__init__({"status": [f"Gateway status '{status}' has no payment status mapping"]})
