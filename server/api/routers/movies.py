from __future__ import annotations

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Path, Query

from backend.catalog import CatalogService
from backend.models import GenreId, Movie
from server.api.deps import get_catalog_service

router = APIRouter(prefix="/movies")

_MAX_ENRICH_BATCH = 100


def _genre_id(raw: str) -> GenreId:
    """Los ids numéricos (TMDb) se pasan como int; el resto tal cual ("action")."""
    text = raw.strip()
    return int(text) if text.isdigit() else text


@router.get("/search")
def search(
    title: str = Query("", description="Título (vacío = trending)"),
    page: int = Query(1, ge=1),
    catalog: CatalogService = Depends(get_catalog_service),
) -> dict[str, Any]:
    return catalog.search_by_title(title, page).to_dict()


@router.get("/trending")
def trending(
    page: int = Query(1, ge=1),
    catalog: CatalogService = Depends(get_catalog_service),
) -> dict[str, Any]:
    return catalog.trending(page).to_dict()


@router.get("/genre/{genre_id}")
def by_genre(
    genre_id: str = Path(..., min_length=1),
    page: int = Query(1, ge=1),
    catalog: CatalogService = Depends(get_catalog_service),
) -> dict[str, Any]:
    return catalog.by_genre(_genre_id(genre_id), page).to_dict()


@router.get("/region/{region_code}")
def by_region(
    region_code: str = Path(..., min_length=2, max_length=8),
    page: int = Query(1, ge=1),
    catalog: CatalogService = Depends(get_catalog_service),
) -> dict[str, Any]:
    return catalog.by_region(region_code.lower(), page).to_dict()


@router.get("/images")
def images(
    title: str = Query(..., min_length=1),
    year: int | None = Query(None, ge=1800, le=3000),
    imdb_id: str | None = Query(None),
    tmdb_id: str | None = Query(None),
    catalog: CatalogService = Depends(get_catalog_service),
) -> dict[str, Any]:
    """Póster / backdrop / miniatura de tráiler de un solo título (vista de detalle)."""
    return asdict(catalog.get_poster_images(title, year, imdb_id, tmdb_id))


@router.post("/enrich")
def enrich(
    movies: list[dict[str, Any]] = Body(...),
    catalog: CatalogService = Depends(get_catalog_service),
) -> list[dict[str, Any]]:
    if len(movies) > _MAX_ENRICH_BATCH:
        raise HTTPException(status_code=413, detail=f"Too many movies (max {_MAX_ENRICH_BATCH})")
    enriched = catalog.enrich([Movie.from_dict(m) for m in movies])
    return [m.to_dict() for m in enriched]
