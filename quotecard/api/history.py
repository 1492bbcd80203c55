"""Quote history API."""

from typing import List, Optional

from fastapi import APIRouter, HTTPException

from quotecard.models.history import QuoteHistoryEntry
from quotecard.services.quote_history import QuoteHistory

router = APIRouter(prefix="/history", tags=["history"])

_history: Optional[QuoteHistory] = None


def set_quote_history(history: QuoteHistory) -> None:
    """Set the quote history instance."""
    global _history
    _history = history


def _get_history() -> QuoteHistory:
    if _history is None:
        raise HTTPException(status_code=503, detail="Quote history not initialized")
    return _history


@router.get("", response_model=List[QuoteHistoryEntry])
async def list_history():
    """Generated quotes, most recent first."""
    return _get_history().entries()


@router.delete("")
async def clear_history():
    """Forget all generated quotes."""
    _get_history().clear()
    return {"message": "Quote history cleared"}
