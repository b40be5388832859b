"""Pydantic request/response schemas for the Identity API."""

from datetime import datetime

from pydantic import BaseModel


class RegisterRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [{"name": "Jane Doe", "email": "jane@example.com", "password": "s3cret-pass"}],
        }
    }

    name: str
    email: str
    password: str


class UserResponse(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "id": 7,
                    "name": "Jane Doe",
                    "email": "jane@example.com",
                    "role": "customer",
                    "is_blocked": False,
                    "created_at": "2024-05-01T10:00:00Z",
                }
            ]
        }
    }

    id: int
    name: str
    email: str
    role: str
    is_blocked: bool
    created_at: datetime

    @classmethod
    def from_user(cls, user) -> "UserResponse":
        return cls(
            id=user.number,
            name=user.name,
            email=user.email,
            role=user.role,
            is_blocked=bool(user.is_blocked),
            created_at=user.created_at,
        )


class StatusResponse(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"status": "ok"}]}}

    status: str = "ok"
