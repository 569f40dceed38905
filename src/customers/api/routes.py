"""FastAPI routes for the Customers domain."""

from fastapi import APIRouter, Depends

from bootstrap import Container, get_container
from customers.api.schemas import (
    ClientIdResponse,
    ClientResponse,
    RegisterClientRequest,
    StatusResponse,
    UpdateClientRequest,
)
from customers.client.management import RegisterClient, UpdateClient

router = APIRouter(prefix="/client", tags=["clients"])


@router.post("", status_code=201, response_model=ClientIdResponse)
def register_client(body: RegisterClientRequest, container: Container = Depends(get_container)) -> ClientIdResponse:
    command = RegisterClient(cpf=body.cpf, name=body.name, email=body.email)
    client_id = container.client_management.register_client(command)
    return ClientIdResponse(client_id=client_id)


@router.get("", response_model=list[ClientResponse])
def list_clients(container: Container = Depends(get_container)) -> list[ClientResponse]:
    return [ClientResponse.model_validate(client) for client in container.client_management.list_clients()]


@router.get("/{client_id}", response_model=ClientResponse)
def get_client(client_id: str, container: Container = Depends(get_container)) -> ClientResponse:
    return ClientResponse.model_validate(container.client_management.get_client(client_id))


@router.put("/{client_id}", response_model=ClientResponse)
def update_client(
    client_id: str, body: UpdateClientRequest, container: Container = Depends(get_container)
) -> ClientResponse:
    command = UpdateClient(client_id=client_id, name=body.name, email=body.email)
    return ClientResponse.model_validate(container.client_management.update_client(command))


@router.delete("/{client_id}", response_model=StatusResponse)
def remove_client(client_id: str, container: Container = Depends(get_container)) -> StatusResponse:
    container.client_management.remove_client(client_id)
    return StatusResponse(status="removed")
