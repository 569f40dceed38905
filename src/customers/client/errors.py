from shared.errors import ObjectNotFoundError, ValidationError


class ClientNotFound(ObjectNotFoundError):
    def __init__(self, client_id: str) -> None:
        self.client_id = client_id
        super().__init__({"client_id": [f"Client '{client_id}' does not exist"]})


class ClientAlreadyExists(ValidationError):
    pass
