"""
Request binding with validation.

Binding collects one or more request sources (path params, query string,
headers, body) into a plain mapping. Validation runs afterwards, and only
when binding succeeded:

- a bind failure raises BindError with a plain message (HTTP 400)
- a validation failure raises RequestValidationError (HTTP 422)
"""

from __future__ import annotations

import json
import logging
import types
from typing import Any, Dict, Iterable, Optional, Tuple, Type, TypeVar, Union, get_args, get_origin

from fastapi import Request
from pydantic import BaseModel

from .validation import StructValidator, default_validator


logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

# Query params take part in bind() only for these methods
QUERY_BIND_METHODS = {"GET", "DELETE", "HEAD"}

JSON_MEDIA_TYPE = "application/json"
FORM_MEDIA_TYPES = {"application/x-www-form-urlencoded", "multipart/form-data"}


class BindError(Exception):
    """A request could not be bound; ``message`` is safe to return to clients."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def _collect(pairs: Iterable[Tuple[str, Any]]) -> Dict[str, Any]:
    """Fold key/value pairs into a dict; repeated keys keep every value in a list."""
    out: Dict[str, Any] = {}
    for key, value in pairs:
        if key not in out:
            out[key] = value
        elif isinstance(out[key], list):
            out[key].append(value)
        else:
            out[key] = [out[key], value]
    return out


_SEQUENCE_ORIGINS = (list, set, frozenset, tuple)


def _is_sequence_annotation(annotation: Any) -> bool:
    origin = get_origin(annotation)
    if origin in _SEQUENCE_ORIGINS or annotation in _SEQUENCE_ORIGINS:
        return True
    # Optional[List[str]], List[str] | None
    if origin is Union or isinstance(annotation, types.UnionType):
        return any(_is_sequence_annotation(arg) for arg in get_args(annotation))
    return False


def _listify(model: Type[BaseModel], data: Dict[str, Any]) -> Dict[str, Any]:
    """Wrap single values bound to sequence-typed fields, e.g. ?tag=a for tag: List[str]."""
    for name, field in model.model_fields.items():
        key = field.alias or name
        if key in data and not isinstance(data[key], list) and _is_sequence_annotation(field.annotation):
            data[key] = [data[key]]
    return data


def _media_type(request: Request) -> str:
    content_type = request.headers.get("content-type", "")
    return content_type.split(";", 1)[0].strip().lower()


class ValidatingBinder:
    """Binds request data into pydantic models and validates the result."""

    def __init__(self, validator: Optional[StructValidator] = None):
        self.validator = validator or default_validator

    # --- sources -----------------------------------------------------------

    def path_params(self, request: Request) -> Dict[str, Any]:
        return dict(request.path_params)

    def query_params(self, request: Request, model: Type[BaseModel]) -> Dict[str, Any]:
        return _listify(model, _collect(request.query_params.multi_items()))

    def headers(self, request: Request, model: Type[BaseModel]) -> Dict[str, Any]:
        pairs = ((key.lower().replace("-", "_"), value) for key, value in request.headers.items())
        return _listify(model, _collect(pairs))

    async def body(self, request: Request, model: Type[BaseModel]) -> Dict[str, Any]:
        raw = await request.body()
        if not raw:
            return {}

        media_type = _media_type(request)
        if media_type == JSON_MEDIA_TYPE or media_type.endswith("+json"):
            try:
                data = json.loads(raw)
            except ValueError as exc:
                raise BindError(f"Syntax error: {exc}") from exc
            if not isinstance(data, dict):
                raise BindError(
                    f"Unmarshal type error: expected=object, got={type(data).__name__}"
                )
            return data

        if media_type in FORM_MEDIA_TYPES:
            form = await request.form()
            return _listify(model, _collect(form.multi_items()))

        logger.debug(f"Cannot bind body with content type {media_type!r}")
        raise BindError("Unsupported Media Type")

    # --- bind + validate ---------------------------------------------------

    def _validate(self, model: Type[M], data: Dict[str, Any]) -> M:
        return self.validator.validate(model, data)

    async def bind(self, request: Request, model: Type[M]) -> M:
        """
        Bind path params, then query params (GET/DELETE/HEAD only), then the
        body. Later sources override earlier keys.
        """
        data = self.path_params(request)
        if request.method.upper() in QUERY_BIND_METHODS:
            data.update(self.query_params(request, model))
        data.update(await self.body(request, model))
        return self._validate(model, data)

    async def bind_path_params(self, request: Request, model: Type[M]) -> M:
        return self._validate(model, self.path_params(request))

    async def bind_query_params(self, request: Request, model: Type[M]) -> M:
        return self._validate(model, self.query_params(request, model))

    async def bind_headers(self, request: Request, model: Type[M]) -> M:
        return self._validate(model, self.headers(request, model))

    async def bind_body(self, request: Request, model: Type[M]) -> M:
        return self._validate(model, await self.body(request, model))


_BIND_METHODS = {
    "all": "bind",
    "path": "bind_path_params",
    "query": "bind_query_params",
    "headers": "bind_headers",
    "body": "bind_body",
}


def bind(model: Type[M], source: str = "all"):
    """
    FastAPI dependency factory.

        @app.post("/items/{item_id}")
        async def create(item: Item = Depends(bind(Item))):
            ...

    Uses the binder installed on ``app.state.binder`` and falls back to a
    default ValidatingBinder when the app has none.
    """
    try:
        method_name = _BIND_METHODS[source]
    except KeyError:
        raise ValueError(
            f"Unknown bind source {source!r}; expected one of {', '.join(_BIND_METHODS)}"
        ) from None

    async def dependency(request: Request) -> BaseModel:
        binder = getattr(request.app.state, "binder", None) or ValidatingBinder()
        return await getattr(binder, method_name)(request, model)

    return dependency
