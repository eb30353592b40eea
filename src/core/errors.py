"""Errores del harness.

Por qué un conjunto cerrado:
- El caller sólo necesita distinguir tres familias: transporte, parseo y
  encoding. Todo lo demás es un bug y debe propagarse tal cual.
- Cada error se loguea una sola vez (al crearse). Re-envolverlo no vuelve a
  loguear, así los tests no ven la misma traza repetida.
"""

from __future__ import annotations

import logging


class HarnessError(Exception):
    """Base de todos los errores del harness."""

    def __init__(self, message: str, *, origin: str | None = None, logged: bool = False) -> None:
        super().__init__(message)
        self.origin = origin or __name__
        self.logged = logged
        if not self.logged:
            logging.getLogger(self.origin).error(message)
            self.logged = True

    @classmethod
    def wrap(cls, exc: BaseException, *, origin: str | None = None) -> HarnessError:
        """Envuelve `exc` en un error de este tipo.

        - Si `exc` ya es de este tipo, se devuelve sin tocar.
        - Si es otro `HarnessError`, se crea el nuevo sin volver a loguear.
        """

        if isinstance(exc, cls):
            return exc
        message = str(exc) or exc.__class__.__name__
        already_logged = isinstance(exc, HarnessError) and exc.logged
        err = cls(message, origin=origin, logged=already_logged)
        err.__cause__ = exc
        return err


class TransportError(HarnessError):
    """Fallo de red/transporte (conexión rechazada, timeout, TLS...)."""


class ParseError(HarnessError):
    """JSON o URL que no se pudo parsear."""


class JsonLookupError(ParseError):
    """La clave pedida no existe o no tiene la forma esperada."""


class EncodingError(HarnessError):
    """Fallo al codificar/decodificar texto (UTF-8, charset)."""
