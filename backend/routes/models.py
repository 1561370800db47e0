"""Pydantic request models for API endpoints."""

from pydantic import BaseModel

from ordo_manager.models import UserRole


class RegisterBody(BaseModel):
    name: str
    password: str
    confirm_password: str
    role: UserRole = UserRole.PLAYER


class LoginBody(BaseModel):
    name: str
    password: str = ""


class SelectSystemBody(BaseModel):
    system_id: str


class CreateCharacter(BaseModel):
    name: str


class ChangeOwnerBody(BaseModel):
    owner_id: str


class StartSessionBody(BaseModel):
    name: str


class AddToSessionBody(BaseModel):
    character_id: str


class MessageBody(BaseModel):
    text: str


class RollBody(BaseModel):
    sides: int
