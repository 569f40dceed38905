"""Client registration and management — commands and handler."""

import structlog
from pydantic import BaseModel

from customers.client.client import Client
from customers.client.errors import ClientAlreadyExists, ClientNotFound
from customers.client.repository import ClientRepository

logger = structlog.get_logger(__name__)


class RegisterClient(BaseModel):
    cpf: str
    name: str
    email: str


class UpdateClient(BaseModel):
    client_id: str
    name: str | None = None
    email: str | None = None


class ClientManagementHandler:
    def __init__(self, clients: ClientRepository) -> None:
        self.clients = clients

    def register_client(self, command: RegisterClient) -> str:
        if self.clients.find_by_email(command.email) is not None:
            raise ClientAlreadyExists({"email": [f"A client with email '{command.email}' already exists"]})
        if self.clients.find_by_cpf(command.cpf) is not None:
            raise ClientAlreadyExists({"cpf": ["A client with this CPF already exists"]})

        client = Client.register(cpf=command.cpf, name=command.name, email=command.email)
        self.clients.add(client)
        logger.info("Client registered", client_id=client.id)
        return client.id

    def update_client(self, command: UpdateClient) -> Client:
        client = self.get_client(command.client_id)
        if command.email and command.email != client.email:
            other = self.clients.find_by_email(command.email)
            if other is not None and other.id != client.id:
                raise ClientAlreadyExists({"email": [f"A client with email '{command.email}' already exists"]})

        client.change_details(name=command.name, email=command.email)
        self.clients.add(client)
        return client

    def remove_client(self, client_id: str) -> None:
        self.get_client(client_id)
        self.clients.delete(client_id)
        logger.info("Client removed", client_id=client_id)

    def get_client(self, client_id: str) -> Client:
        client = self.clients.find(client_id)
        if client is None:
            raise ClientNotFound(client_id)
        return client

    def list_clients(self) -> list[Client]:
        return self.clients.list_all()
