from __future__ import annotations

"""
backend/errors.py

Taxonomía de errores del catálogo.

- ProviderError: status HTTP no-2xx, fallo de transporte, circuit breaker abierto
  o credenciales ausentes. Nunca sale del tier donde ocurre.
- MalformedResponseError: 2xx pero sin los campos que el transform no puede defaultear
  (p.ej. falta el array `result`). Es un ProviderError a efectos de fallback.
- FallbackUnavailableError: ni siquiera el catálogo mock pudo responder. Único error
  que ve el caller (fatal).
"""


class CatalogError(Exception):
    """Base de los errores del proyecto."""


class ProviderError(CatalogError):
    def __init__(self, provider: str, message: str, *, status: int | None = None) -> None:
        self.provider = provider
        self.status = status
        self.message = message
        status_part = f" (HTTP {status})" if status is not None else ""
        super().__init__(f"[{provider}] {message}{status_part}")


class MalformedResponseError(ProviderError):
    pass


class FallbackUnavailableError(CatalogError):
    def __init__(self, intent: str, cause: BaseException) -> None:
        self.intent = intent
        self.cause = cause
        super().__init__(f"Mock fallback failed for intent {intent!r}: {cause!r}")
