from typing import List, Optional

import pytest
from fastapi import Depends
from fastapi.testclient import TestClient
from pydantic import BaseModel, Field

from webutils.binding import bind
from webutils.main import new_app
from webutils.validation import StructValidator


class Item(BaseModel):
    item_id: int
    name: str = Field(min_length=1)
    price: float = Field(gt=0)


class Search(BaseModel):
    q: str = Field(min_length=1)
    tag: List[str] = []
    page: int = 1


class TraceHeaders(BaseModel):
    x_request_id: str
    x_tenant: Optional[str] = None


class RecordingValidator(StructValidator):
    def __init__(self):
        self.calls = []

    def validate(self, model, data):
        self.calls.append((model, dict(data)))
        return super().validate(model, data)


def make_client(validator=None):
    app = new_app(validator=validator)

    @app.post("/items/{item_id}")
    async def create_item(item: Item = Depends(bind(Item))):
        return item.model_dump()

    @app.get("/items/{item_id}")
    async def get_item(item: Item = Depends(bind(Item))):
        return item.model_dump()

    @app.get("/search")
    async def search(params: Search = Depends(bind(Search, "query"))):
        return params.model_dump()

    @app.get("/trace")
    async def trace(headers: TraceHeaders = Depends(bind(TraceHeaders, "headers"))):
        return headers.model_dump()

    @app.put("/body")
    async def body_only(item: Item = Depends(bind(Item, "body"))):
        return item.model_dump()

    @app.get("/boom")
    async def boom():
        raise RuntimeError("kaboom")

    return TestClient(app, raise_server_exceptions=False)


client = make_client()


def test_bind_path_and_json_body():
    r = client.post("/items/42", json={"name": "lamp", "price": 9.5})
    assert r.status_code == 200
    assert r.json() == {"item_id": 42, "name": "lamp", "price": 9.5}


def test_bind_form_body():
    r = client.post("/items/7", data={"name": "desk", "price": "120"})
    assert r.status_code == 200
    assert r.json() == {"item_id": 7, "name": "desk", "price": 120.0}


def test_bind_uses_query_params_on_get():
    r = client.get("/items/3?name=chair&price=15")
    assert r.status_code == 200
    assert r.json() == {"item_id": 3, "name": "chair", "price": 15.0}


def test_bind_ignores_query_params_on_post():
    r = client.post("/items/3?name=chair&price=15")
    assert r.status_code == 422


def test_body_overrides_path_params():
    r = client.post("/items/3", json={"item_id": 4, "name": "x", "price": 1})
    assert r.json()["item_id"] == 4


def test_validation_failure_returns_422():
    r = client.post("/items/1", json={"name": "", "price": -1})
    assert r.status_code == 422
    locs = sorted(tuple(err["loc"]) for err in r.json()["detail"])
    assert locs == [("name",), ("price",)]


def test_malformed_json_is_a_bind_error():
    r = client.post(
        "/items/1",
        content=b'{"name": ',
        headers={"content-type": "application/json"},
    )
    assert r.status_code == 400
    assert r.json()["detail"].startswith("Syntax error")


def test_json_array_is_a_bind_error():
    r = client.post("/items/1", json=[1, 2])
    assert r.status_code == 400
    assert "expected=object" in r.json()["detail"]


def test_unsupported_media_type_is_a_bind_error():
    r = client.post(
        "/items/1",
        content=b"name=x",
        headers={"content-type": "text/plain"},
    )
    assert r.status_code == 400
    assert r.json() == {"detail": "Unsupported Media Type"}


def test_bind_query_params_repeated_and_single_values():
    r = client.get("/search", params=[("q", "shoes"), ("tag", "red"), ("tag", "sale")])
    assert r.status_code == 200
    assert r.json() == {"q": "shoes", "tag": ["red", "sale"], "page": 1}

    r = client.get("/search?q=shoes&tag=red&page=2")
    assert r.json() == {"q": "shoes", "tag": ["red"], "page": 2}


def test_bind_query_params_validation():
    r = client.get("/search?q=")
    assert r.status_code == 422


def test_bind_headers():
    r = client.get("/trace", headers={"X-Request-Id": "abc-123"})
    assert r.status_code == 200
    assert r.json() == {"x_request_id": "abc-123", "x_tenant": None}

    r = client.get("/trace")
    assert r.status_code == 422


def test_bind_body_ignores_path_and_query():
    r = client.put("/body?item_id=1", json={"item_id": 5, "name": "a", "price": 2})
    assert r.status_code == 200
    assert r.json()["item_id"] == 5

    r = client.put("/body?item_id=1", json={"name": "a", "price": 2})
    assert r.status_code == 422


def test_validation_runs_only_after_successful_bind():
    validator = RecordingValidator()
    recording_client = make_client(validator)

    r = recording_client.post("/items/1", content=b"[", headers={"content-type": "application/json"})
    assert r.status_code == 400
    assert validator.calls == []

    r = recording_client.post("/items/1", json={"name": "a", "price": 1})
    assert r.status_code == 200
    assert validator.calls == [(Item, {"item_id": "1", "name": "a", "price": 1})]


def test_unhandled_exception_returns_500():
    r = client.get("/boom")
    assert r.status_code == 500
    assert r.json() == {"detail": "Internal server error"}


def test_unknown_bind_source():
    with pytest.raises(ValueError):
        bind(Item, "cookies")


def test_trailing_slash_keeps_query_string():
    r = client.get("/search/?q=boots&tag=red")
    assert r.status_code == 200
    assert r.json() == {"q": "boots", "tag": ["red"], "page": 1}
