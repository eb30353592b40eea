"""Utilidades JSON / URL-encoding para escenarios de test.

Funciones puras: no guardan estado. Los fallos de parseo se propagan como
`ParseError` (nunca como un `False` silencioso); la validación de schema es la
única que devuelve un booleano.

Perfiles:
    Un mismo JSON puede guardar varios datasets con nombre, p.ej.::

        {
          "valid_user": {"name": "Ann", "age": 30},
          "missing_name": {"age": 30}
        }

    `get_profile_from_json("users.json", "valid_user")` devuelve sólo ese
    sub-documento serializado.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, TypeVar
from urllib.parse import parse_qsl, quote_plus, unquote_plus, urlsplit

from jsonschema import validators
from jsonschema.exceptions import best_match
from pydantic import TypeAdapter

from core.config import AppSettings
from core.errors import EncodingError, JsonLookupError, ParseError
from core.resources_loader import read_resource_text

if TYPE_CHECKING:
    from core.domain.models import ParamValue, Response

logger = logging.getLogger(__name__)

T = TypeVar("T")

_UTF8 = "utf-8"


def _loads(text: str) -> Any:
    try:
        return json.loads(text)
    except (TypeError, ValueError) as exc:
        raise ParseError.wrap(exc, origin=__name__) from exc


def _load_object(text: str) -> dict[str, Any]:
    node = _loads(text)
    if not isinstance(node, dict):
        raise ParseError(f"Expected a JSON object, got {type(node).__name__}", origin=__name__)
    return node


def _dumps(node: Any) -> str:
    return json.dumps(node, ensure_ascii=False, separators=(",", ":"))


def _as_text(node: Any) -> str:
    # Texto de un nodo: strings tal cual, escalares como JSON, contenedores vacíos.
    if isinstance(node, str):
        return node
    if isinstance(node, (dict, list)):
        return ""
    return json.dumps(node)


def param_to_str(value: ParamValue) -> str:
    """Representación textual de un `ParamValue` para URL-encoding."""

    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


# --- Schema -----------------------------------------------------------------


def _build_validator(json_data: str, json_schema: str) -> tuple[Any, Any]:
    schema = _loads(json_schema)
    data = _loads(json_data)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema), data


def validate_json_schema(json_data: str, json_schema: str) -> bool:
    """Valida un JSON contra un JSON schema (ambos como texto)."""

    validator, data = _build_validator(json_data, json_schema)
    error = best_match(validator.iter_errors(data))
    if error is not None:
        logger.debug("Schema validation failed: %s", error.message)
    return error is None


def schema_errors(json_data: str, json_schema: str) -> list[str]:
    """Detalle de los errores de validación (vacío si el JSON es válido)."""

    validator, data = _build_validator(json_data, json_schema)
    out: list[str] = []
    for err in sorted(validator.iter_errors(data), key=lambda e: list(e.absolute_path)):
        location = "/".join(str(p) for p in err.absolute_path) or "$"
        out.append(f"{location}: {err.message}")
    return out


# --- Claves -----------------------------------------------------------------


def get_value_of_key_from_json(key: str, json_text: str) -> str | None:
    """Valor textual de una clave de primer nivel, o `None` si no existe."""

    obj = _load_object(json_text)
    if key not in obj:
        return None
    return _as_text(obj[key])


def get_array_value_of_key_from_json(key: str, json_text: str) -> list[str | None]:
    """Valores de un array de primer nivel, en orden.

    Los elementos que no son strings se devuelven como `None`. Si la clave no
    existe o su valor no es un array (incluido `null`) se lanza
    `JsonLookupError`.
    """

    obj = _load_object(json_text)
    value = obj.get(key)
    if not isinstance(value, list):
        raise JsonLookupError(f"Key '{key}' is not a JSON array", origin=__name__)
    return [item if isinstance(item, str) else None for item in value]


def remove_key_from_json(key: str, json_text: str) -> str:
    obj = _load_object(json_text)
    obj.pop(key, None)
    return _dumps(obj)


def list_to_json_array(values: list[str]) -> str:
    return _dumps(list(values))


# --- Recursos / perfiles ----------------------------------------------------


def load_json(json_name: str, settings: AppSettings | None = None) -> str:
    """Carga un JSON de recursos y lo devuelve normalizado (compacto)."""

    return _dumps(_loads(read_resource_text(json_name, settings)))


def get_profile_from_json(json_name: str, profile_name: str, settings: AppSettings | None = None) -> str:
    """Extrae un perfil (sub-documento con nombre) y lo re-serializa.

    Un perfil inexistente se serializa como `"null"`.
    """

    profiles = _load_object(load_json(json_name, settings))
    return _dumps(profiles.get(profile_name))


def load_map_from_resource(
    json_name: str,
    profile_name: str,
    settings: AppSettings | None = None,
) -> dict[str, str | None]:
    """Como `get_profile_from_json`, pero parseado a un mapa plano str->str.

    Un valor `null` en el perfil se devuelve como `None`.
    """

    profile = _loads(get_profile_from_json(json_name, profile_name, settings))
    if not isinstance(profile, dict):
        raise JsonLookupError(f"Profile '{profile_name}' in '{json_name}' is not a JSON object", origin=__name__)

    out: dict[str, str | None] = {}
    for k, v in profile.items():
        if isinstance(v, (dict, list)):
            raise JsonLookupError(f"Profile '{profile_name}' key '{k}' is not a flat value", origin=__name__)
        out[k] = v if v is None or isinstance(v, str) else param_to_str(v)
    return out


def get_resource_from_response(response: Response, resource_type: type[T]) -> T:
    """Mapea el body de la respuesta a un tipo (modelo pydantic, dict, list...)."""

    try:
        return TypeAdapter(resource_type).validate_json(response.body)
    except ValueError as exc:
        raise ParseError.wrap(exc, origin=__name__) from exc


def get_base_uri(settings: AppSettings | None = None) -> str | None:
    """Base URI del entorno (`env`)."""

    return (settings or AppSettings()).env


# --- URL-encoding -----------------------------------------------------------


def encode_utf8(value: str) -> str:
    """Percent-encoding UTF-8 estilo formulario (espacio -> `+`, `~` -> `%7E`)."""

    try:
        encoded = quote_plus(value, safe="*", encoding=_UTF8, errors="strict")
    except UnicodeError as exc:
        raise EncodingError.wrap(exc, origin=__name__) from exc
    # quote_plus nunca codifica `~`; los formularios HTML sí.
    return encoded.replace("~", "%7E")


def decode_utf8(value: str) -> str:
    try:
        return unquote_plus(value, encoding=_UTF8, errors="strict")
    except UnicodeError as exc:
        raise EncodingError.wrap(exc, origin=__name__) from exc


def map_to_url_encoded_string(mapping: Mapping[str, ParamValue]) -> str:
    """`k1=v1&k2=v2`. Sólo se codifican los valores; un mapa vacío da `""`."""

    return "&".join(f"{k}={encode_utf8(param_to_str(v))}" for k, v in mapping.items())


def url_encoded_string_to_map(encoded: str) -> dict[str, str]:
    """Parsea `k1=v1&email=mail%40example.com` a un mapa decodificado."""

    try:
        pairs = parse_qsl(encoded, keep_blank_values=True, encoding=_UTF8, errors="strict")
    except UnicodeError as exc:
        raise EncodingError.wrap(exc, origin=__name__) from exc
    # dict() deja el último valor en claves duplicadas.
    return dict(pairs)


def url_query_params_to_map(url: str) -> dict[str, str]:
    """Query string de una URL completa a mapa decodificado."""

    try:
        query = urlsplit(url).query
    except ValueError as exc:
        raise ParseError.wrap(exc, origin=__name__) from exc
    return url_encoded_string_to_map(query)


def encode_map(mapping: Mapping[str, ParamValue]) -> dict[str, str]:
    return {encode_utf8(str(k)): encode_utf8(param_to_str(v)) for k, v in mapping.items()}


# --- Pretty-printing (diagnóstico) ------------------------------------------


def pretty_print_map(mapping: Mapping[str, Any]) -> str:
    if not mapping:
        return "none"
    return "".join(f"\n  {k}:{v}" for k, v in mapping.items())


def pretty_print_json(json_text: str) -> str:
    return json.dumps(_loads(json_text), ensure_ascii=False, indent=2)


def try_pretty_print_json(json_text: str) -> str | None:
    """Como `pretty_print_json`, pero `None` si el texto no es JSON (sin loguear)."""

    try:
        node = json.loads(json_text)
    except (TypeError, ValueError):
        return None
    return json.dumps(node, ensure_ascii=False, indent=2)
