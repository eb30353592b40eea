"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación en la asignación: los mapas de un `Request` nunca quedan en `None`.
- `Response` congelado: se construye una vez por intercambio HTTP y no muta.

Nota:
- Estos modelos describen *qué* se envía/recibe, no *cómo* (eso es el
  `RestClient`).
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from enum import Enum
from typing import Any, TypeVar, Union

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

from core import json_utils
from core.errors import ParseError

T = TypeVar("T")

# Valor de `Request.params`: tagged union sin reflexión.
ParamValue = Union[str, int, float, bool, None]

DEFAULT_CLIENT_ID = "rms-ui"
JSON_CONTENT_TYPE = "application/json"

_SEPARATOR = "-" * 62


class Verb(str, Enum):
    """Métodos HTTP soportados."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"


def _render_json_or_raw(body: str) -> str:
    pretty = json_utils.try_pretty_print_json(body)
    return body if pretty is None else pretty


class Request(BaseModel):
    """Descripción mutable de una llamada HTTP.

    Por qué mutable:
    - Los escenarios de test construyen un request base y lo van ajustando
      (headers, auth, params) paso a paso.
    - `copy()` permite derivar variantes sin tocar el original.
    """

    model_config = ConfigDict(validate_assignment=True)

    path: str = Field(
        default="",
        description="Ruta relativa al base URI; admite placeholders `{name}`.",
    )
    verb: Verb | None = Field(
        default=None,
        description="Método HTTP (sólo lo usa `RestClient.send`).",
    )
    version: str = Field(
        default="",
        description="Prefijo que se antepone a `path` (p.ej. '/v2').",
    )
    body: str = Field(
        default="",
        description="Payload crudo.",
    )
    content_type: str | None = Field(
        default=None,
        description="Content-Type del request.",
    )
    headers: dict[str, str] = Field(default_factory=dict)
    query_params: dict[str, str] = Field(default_factory=dict)
    form_params: dict[str, str] = Field(default_factory=dict)
    path_params: dict[str, str] = Field(default_factory=dict)
    params: dict[str, ParamValue] = Field(
        default_factory=dict,
        description="Params genéricos; en POST se URL-encodean al body si no hay form params.",
    )

    @field_validator("headers", "query_params", "form_params", "path_params", "params", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    @classmethod
    def generate(cls, body: str, path: str, *, client_id: str = DEFAULT_CLIENT_ID) -> Request:
        """Request JSON con el header `X-Client-Id` ya sembrado."""

        return cls(
            path=path,
            body=body,
            content_type=JSON_CONTENT_TYPE,
            headers={"X-Client-Id": client_id},
        )

    def copy(self) -> Request:  # type: ignore[override]
        """Copia con cada mapa copiado (shallow): mutar la copia no toca el original."""

        return Request(
            path=self.path,
            verb=self.verb,
            version=self.version,
            body=self.body,
            content_type=self.content_type,
            headers=dict(self.headers),
            query_params=dict(self.query_params),
            form_params=dict(self.form_params),
            path_params=dict(self.path_params),
            params=dict(self.params),
        )

    def add_authorization(self, token: str) -> None:
        self.headers["Authorization"] = token

    def delete_authorization(self) -> None:
        self.headers.pop("Authorization", None)

    def clear(self) -> None:
        """Vacía path, body y mapas. `content_type`, `version` y `verb` se mantienen."""

        self.path = ""
        self.body = ""
        self.headers.clear()
        self.query_params.clear()
        self.form_params.clear()
        self.path_params.clear()
        self.params.clear()

    def __str__(self) -> str:
        content_type = self.content_type if self.content_type is not None else "null"
        body = _render_json_or_raw(self.body) if JSON_CONTENT_TYPE in content_type else self.body
        verb = self.verb.value if self.verb is not None else ""
        return (
            "---- Request ----\n"
            f"Method(verb): {verb}\n"
            f"Path:         {self.path}\n"
            f"Content-Type: {content_type}\n"
            f"Headers:      {json_utils.pretty_print_map(self.headers)}\n"
            f"Body:\n{body}\n"
            f"Params:       {json_utils.pretty_print_map(self.params)}\n"
            f"Path parameters:{json_utils.pretty_print_map(self.path_params)}\n"
            f"QueryParams:  {json_utils.pretty_print_map(self.query_params)}\n"
            f"Version:      {self.version}\n"
            f"{_SEPARATOR}"
        )


class Response(BaseModel):
    """Resultado de un intercambio HTTP: status, body y headers.

    Se construye una sola vez a partir de la respuesta del transporte.
    """

    model_config = ConfigDict(frozen=True)

    status_code: int = Field(..., description="Status tal cual lo devolvió el servidor (incluidos códigos no estándar).")
    body: str = Field(default="")
    headers: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_transport(cls, status_code: int, body: str, header_pairs: Iterable[tuple[str, str]]) -> Response:
        """Aplana la lista de headers a un mapa (el último valor gana)."""

        headers: dict[str, str] = {}
        for name, value in header_pairs:
            headers[name] = value
        return cls(status_code=status_code, body=body, headers=headers)

    def header(self, name: str) -> str | None:
        """Busca un header sin distinguir mayúsculas."""

        wanted = name.lower()
        found = None
        for key, value in self.headers.items():
            if key.lower() == wanted:
                found = value
        return found

    def json(self) -> Any:
        try:
            return json.loads(self.body)
        except ValueError as exc:
            raise ParseError.wrap(exc, origin=__name__) from exc

    def resource(self, resource_type: type[T]) -> T:
        """Mapea el body a un tipo, p.ej. `response.resource(User)`."""

        return json_utils.get_resource_from_response(self, resource_type)

    def __str__(self) -> str:
        is_json = self.header("Content-Type") == JSON_CONTENT_TYPE
        body = _render_json_or_raw(self.body) if is_json else self.body
        return (
            "----Response----\n"
            f"Status code: {self.status_code}\n"
            f"Headers:{json_utils.pretty_print_map(self.headers)}\n"
            f"Body:\n{body}\n"
            f"\n{_SEPARATOR}"
        )
