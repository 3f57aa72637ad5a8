"""
Struct validation backed by pydantic models.

The binder never validates on its own; it hands the bound mapping to a
validator object, so the validation backend can be swapped per app.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Type, TypeVar, Union

from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError


logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def validate_struct(model: Type[M], data: Union[Mapping[str, Any], BaseModel]) -> M:
    """
    Validate ``data`` against ``model`` and return the model instance.

    An existing instance is dumped and validated again, which catches
    instances built with ``model_construct`` or mutated after creation.
    Validation failures surface as RequestValidationError (HTTP 422).
    """
    if isinstance(data, BaseModel):
        data = data.model_dump()
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        logger.debug(f"Validation of {model.__name__} failed: {exc.error_count()} error(s)")
        raise RequestValidationError(exc.errors()) from exc


class StructValidator:
    """Default validator: delegates to validate_struct."""

    def validate(self, model: Type[M], data: Union[Mapping[str, Any], BaseModel]) -> M:
        return validate_struct(model, data)


default_validator = StructValidator()
