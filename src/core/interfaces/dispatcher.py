"""Contrato del despachador de requests.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- Los escenarios de test pueden sustituir el `RestClient` real por un doble
  que grabe los requests sin tocar la red.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import Request, Response


@runtime_checkable
class RequestDispatcher(Protocol):
    """Contrato mínimo: un método bloqueante por verbo HTTP.

    Reglas de diseño:
    - Cada método consume un `Request` y devuelve un único `Response`.
    - Los status codes no se interpretan: los juzga el caller.
    """

    def get(self, request: Request) -> Response: ...

    def post(self, request: Request) -> Response: ...

    def put(self, request: Request) -> Response: ...

    def delete(self, request: Request) -> Response: ...

    def head(self, request: Request) -> Response: ...
