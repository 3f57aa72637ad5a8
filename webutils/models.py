from __future__ import annotations

from pydantic import BaseModel

from .rules import ROOT_MESSAGE


class MessageResponse(BaseModel):
    message: str = ROOT_MESSAGE


class ErrorResponse(BaseModel):
    detail: str
