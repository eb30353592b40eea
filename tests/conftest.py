"""Fixtures compartidos: entorno aislado y un transporte httpx grabador."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable

import httpx
import pytest

from adapters.rest_client import RestClient
from core.config import AppSettings

BASE_URL = "http://api.test"


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for key in list(os.environ):
        if key.upper().startswith("REST_HARNESS_") or key.upper() == "ENV":
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def resources_dir(tmp_path: Path) -> Path:
    d = tmp_path / "fixtures"
    d.mkdir()
    return d


@pytest.fixture
def settings(resources_dir: Path) -> AppSettings:
    return AppSettings(env=BASE_URL, resources_dir=resources_dir)


class Recorder:
    """Handler para `httpx.MockTransport` que guarda cada request recibido."""

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response] | None = None) -> None:
        self.requests: list[httpx.Request] = []
        self.responder = responder or (lambda request: httpx.Response(200, json={"ok": True}))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        return self.responder(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def make_client(settings: AppSettings) -> Callable[..., RestClient]:
    def _make(handler: Callable[[httpx.Request], httpx.Response], **overrides: object) -> RestClient:
        cfg = settings.model_copy(update=overrides) if overrides else settings
        return RestClient(cfg, transport=httpx.MockTransport(handler))

    return _make
