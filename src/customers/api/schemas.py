"""Pydantic request/response schemas for the Customers API."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RegisterClientRequest(BaseModel):
    cpf: str = Field(pattern=r"^\d{11}$")
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(max_length=255)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "cpf": "12345678901",
                    "name": "Maria Silva",
                    "email": "maria@example.com",
                }
            ]
        }
    }


class UpdateClientRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: str | None = Field(default=None, max_length=255)


class ClientIdResponse(BaseModel):
    client_id: str


class ClientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    cpf: str
    name: str
    email: str
    created_at: datetime
    updated_at: datetime | None = None


class StatusResponse(BaseModel):
    status: str = "ok"
