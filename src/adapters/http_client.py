"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers, TLS y política de redirects.
- Facilita testeo: se puede inyectar un `httpx.MockTransport`.
"""

from __future__ import annotations

import httpx

from core.config import AppSettings


def build_client(
    settings: AppSettings | None = None,
    *,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Crea un `httpx.Client` síncrono con los defaults de `settings`.

    Por qué un builder:
    - Centraliza timeouts/headers para que todos los requests se comporten igual.
    - El base URI sale de `settings.env`; si no hay, los paths deben ser absolutos.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "*/*",
    }
    return httpx.Client(
        base_url=settings.env or "",
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=settings.follow_redirects,
        verify=settings.verify_tls,
        headers=headers,
        transport=transport,
    )
