"""Repository for the Client aggregate."""

from protean.exceptions import ObjectNotFoundError

from customers.client.client import Client
from shared.domain import quickbite


@quickbite.repository(part_of=Client)
class ClientRepository:
    def find(self, client_id: str) -> Client | None:
        try:
            return self.get(client_id)
        except ObjectNotFoundError:
            return None

    def _find_one(self, **criteria) -> Client | None:
        return self._dao.query.filter(**criteria).all().first

    def find_by_email(self, email: str) -> Client | None:
        return self._find_one(email=email)

    def find_by_cpf(self, cpf: str) -> Client | None:
        return self._find_one(cpf=cpf)

    def list_all(self) -> list[Client]:
        clients = self._dao.query.all().items
        return sorted(clients, key=lambda client: client.created_at)

    def delete(self, client_id: str) -> None:
        client = self.find(client_id)
        if client is not None:
            self._dao.delete(client)
