from __future__ import annotations

"""
backend/omdb_client.py

Adapter OMDb (film-db legacy). Solo se usa como último recurso de póster en el enrichment.

Notas de OMDb:
- Responde 200 incluso en errores: {"Response": "False", "Error": "..."}.
  - "Movie not found!" => resultado vacío (no es un fallo del proveedor).
  - API key inválida => ProviderError (sí es un fallo).
- "N/A" significa ausente.
"""

from collections.abc import Mapping

from backend import logger
from backend.errors import ProviderError
from backend.http_client import JsonTransport
from backend.models import EMPTY_POSTER_RESULT, PosterResult


def _is_movie_not_found(data: Mapping[str, object]) -> bool:
    """Detecta el not_found "estándar" de OMDb."""
    return data.get("Response") == "False" and data.get("Error") == "Movie not found!"


def _is_invalid_api_key(data: Mapping[str, object]) -> bool:
    err = data.get("Error")
    return data.get("Response") == "False" and isinstance(err, str) and "api key" in err.lower()


def _clean_value(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    v = value.strip()
    if not v or v == "N/A":
        return None
    return v


class OmdbAdapter:
    def __init__(self, transport: JsonTransport) -> None:
        self._http = transport

    def poster(
        self,
        imdb_id: str | None = None,
        title: str | None = None,
        year: int | str | None = None,
    ) -> PosterResult:
        """Por imdbID si lo hay; si no, por título (+ año)."""
        params: dict[str, object] = {}
        if imdb_id:
            params["i"] = imdb_id
        elif title:
            params["t"] = title
            if year:
                params["y"] = year
        else:
            return EMPTY_POSTER_RESULT

        data = self._http.get_json("/", params)

        if _is_invalid_api_key(data):
            raise ProviderError(self._http.provider, f"invalid API key: {data.get('Error')}")

        if data.get("Response") == "False":
            if not _is_movie_not_found(data):
                logger.debug_ctx("OMDB", f"Response=False for {params}: {data.get('Error')!r}")
            return EMPTY_POSTER_RESULT

        poster = _clean_value(data.get("Poster"))
        if poster is None:
            return EMPTY_POSTER_RESULT
        return PosterResult(poster_url=poster)
