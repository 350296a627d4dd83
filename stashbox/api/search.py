"""Cross-entity read endpoints: search, favorites and storage stats."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..core.auth import AuthContext, require_auth
from ..database import get_db
from ..schemas.collection import FolderItemCollection, SearchResults
from ..schemas.common import Envelope
from ..schemas.stats import StorageStats
from ..services.search_service import SearchService
from ..services.stats_service import StatsService
from .common import API_PREFIX, success

router = APIRouter(prefix=API_PREFIX, tags=["file-system"])


@router.get("/search", response_model=Envelope[SearchResults])
def search(
    q: str = Query(..., min_length=1, description="Case-insensitive substring or exact tag"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    results = SearchService(db).search(auth.user_id, q, page, limit)
    return success(results, "Search results retrieved successfully")


@router.get("/favorites", response_model=Envelope[FolderItemCollection])
def get_favorites(
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    return success(SearchService(db).favorites(auth.user_id), "Favorites retrieved successfully")


@router.get("/stats", response_model=Envelope[StorageStats])
def get_storage_stats(
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    """Quota report against the fixed 15 GiB capacity."""
    return success(StatsService(db).storage_stats(auth.user_id), "Storage stats retrieved successfully")
