"""Despachador REST sobre httpx.

Responsabilidad:
- Traducir un `Request` a una llamada httpx (headers, query/path params, body).
- Convertir la respuesta del transporte en un `Response` inmutable.

No hay reintentos ni backoff: un fallo de red sube como `TransportError` y
los status codes se devuelven tal cual para que el test los juzgue.
"""

from __future__ import annotations

import codecs
import logging
import re
from urllib.parse import quote, urlencode

import httpx

from adapters.http_client import build_client
from core.config import AppSettings
from core.domain.models import Request, Response, Verb
from core.errors import EncodingError, ParseError, TransportError
from core.json_utils import map_to_url_encoded_string

logger = logging.getLogger(__name__)

_PATH_PARAM_RE = re.compile(r"\{([^{}/]+)\}")
_FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def expand_path(template: str, path_params: dict[str, str]) -> str:
    """Sustituye `{name}` por el valor percent-encoded del path param."""

    def replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in path_params:
            raise ParseError(f"Path parameter '{name}' has no value", origin=__name__)
        return quote(str(path_params[name]), safe="")

    return _PATH_PARAM_RE.sub(replace, template)


def charset_of(content_type: str | None) -> str | None:
    """Charset declarado en un Content-Type (`text/plain; charset=latin-1`)."""

    if not content_type:
        return None
    for part in content_type.split(";")[1:]:
        key, _, value = part.partition("=")
        if key.strip().lower() == "charset" and value.strip():
            return value.strip().strip('"')
    return None


class RestClient:
    """Un método bloqueante por verbo; la configuración va en el constructor.

    Ejemplo::

        client = RestClient(AppSettings(env="https://api.local"))
        req = Request.generate('{"name": "Ann"}', "/users")
        resp = client.post(req)
        assert resp.status_code == 201
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._client = client or build_client(self._settings, transport=transport)

    @property
    def settings(self) -> AppSettings:
        return self._settings

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> RestClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def set_default_encoding(self, charset: str) -> None:
        """Charset por defecto para los bodies de los siguientes requests de este cliente."""

        logger.info("Setting default encoding to %s", charset)
        try:
            codecs.lookup(charset)
        except LookupError as exc:
            raise EncodingError.wrap(exc, origin=__name__) from exc
        self._settings = self._settings.model_copy(update={"default_charset": charset})

    # --- Verbos -------------------------------------------------------------

    def get(self, request: Request) -> Response:
        return self._dispatch(Verb.GET, request)

    def post(self, request: Request) -> Response:
        # Prioridad del payload: form params > params genéricos > body crudo.
        if request.form_params:
            content_type = request.content_type or ""
            if not content_type.lower().startswith(_FORM_CONTENT_TYPE):
                content_type = _FORM_CONTENT_TYPE
            charset = charset_of(content_type) or self._settings.default_charset
            content = urlencode(request.form_params, encoding=charset)
        elif request.params:
            content = map_to_url_encoded_string(request.params)
            content_type = request.content_type
        else:
            content = request.body
            content_type = request.content_type
        return self._dispatch(Verb.POST, request, content=content, content_type=content_type)

    def put(self, request: Request) -> Response:
        return self._dispatch(Verb.PUT, request, content=request.body)

    def delete(self, request: Request) -> Response:
        return self._dispatch(Verb.DELETE, request)

    def head(self, request: Request) -> Response:
        return self._dispatch(Verb.HEAD, request)

    def send(self, request: Request) -> Response:
        """Despacha según `request.verb`."""

        if request.verb is None:
            raise ValueError("Request has no verb; set `request.verb` or call a verb method")
        handlers = {
            Verb.GET: self.get,
            Verb.POST: self.post,
            Verb.PUT: self.put,
            Verb.DELETE: self.delete,
            Verb.HEAD: self.head,
        }
        return handlers[request.verb](request)

    # --- Internos -----------------------------------------------------------

    def _encode(self, text: str, content_type: str | None) -> bytes:
        charset = charset_of(content_type) or self._settings.default_charset
        try:
            return text.encode(charset)
        except (LookupError, UnicodeError) as exc:
            raise EncodingError.wrap(exc, origin=__name__) from exc

    def _dispatch(
        self,
        verb: Verb,
        request: Request,
        *,
        content: str | None = None,
        content_type: str | None = None,
    ) -> Response:
        logger.info("Sending %s request %s", verb.value, request)

        content_type = content_type or request.content_type
        headers = dict(request.headers)
        if content_type:
            headers["Content-Type"] = content_type

        url = expand_path(request.version + request.path, request.path_params)
        body = self._encode(content, content_type) if content is not None else None

        try:
            reply = self._client.request(
                verb.value,
                url,
                params=request.query_params or None,
                headers=headers,
                content=body,
                follow_redirects=self._settings.follow_redirects,
            )
        except httpx.TransportError as exc:
            raise TransportError.wrap(exc, origin=__name__) from exc

        encoding = reply.headers.encoding
        header_pairs = [(k.decode(encoding), v.decode(encoding)) for k, v in reply.headers.raw]
        resp = Response.from_transport(reply.status_code, reply.text, header_pairs)
        logger.info("Received response %s", resp)
        return resp
