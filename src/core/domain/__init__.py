"""Modelos y entidades del dominio.

Por qué:
- Aquí viven las estructuras de datos del intercambio HTTP (Pydantic v2).
- El dominio no conoce httpx, CLI, ni transporte: solo request/response.
"""
