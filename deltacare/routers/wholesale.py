# deltacare/routers/wholesale.py
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import StreamingResponse
from supabase import Client

from deltacare.core.auth import get_client, require_wholesale
from deltacare.core.realtime import ChangeFeed, get_change_feed
from deltacare.repositories.booking_repo import SubmissionRepository
from deltacare.repositories.wholesale_repo import WholesaleRepository
from deltacare.schemas.auth import Session
from deltacare.schemas.wholesale import (
    QuoteCreate,
    QuoteRead,
    QuoteResult,
    WholesaleDashboard,
    WholesaleProduct,
    WholesaleProfile,
    WholesaleProfileCreate,
    WholesaleTab,
)
from deltacare.services.wholesale_service import WholesaleService

router = APIRouter(prefix="/wholesale", tags=["Wholesale"])

service = WholesaleService(WholesaleRepository(), SubmissionRepository())


@router.get("/dashboard", response_model=WholesaleDashboard)
def wholesale_dashboard(
    tab: WholesaleTab = "dashboard",
    session: Session = Depends(require_wholesale),
    client: Client = Depends(get_client),
):
    """
    Wholesale hub. Tabs other than the profile need a verified business.
    """
    return service.dashboard(client, session, tab)


@router.get("/profile", response_model=WholesaleProfile | None)
def get_profile(
    session: Session = Depends(require_wholesale),
    client: Client = Depends(get_client),
):
    return service.get_profile(client, session)


@router.post(
    "/profile",
    response_model=WholesaleProfile,
    status_code=status.HTTP_201_CREATED,
)
def register_business(
    payload: WholesaleProfileCreate,
    session: Session = Depends(require_wholesale),
    client: Client = Depends(get_client),
):
    """
    Register the caller's business. The profile starts unverified.
    """
    return service.register(client, session, payload)


@router.get("/profile/events")
def profile_events(
    session: Session = Depends(require_wholesale),
    client: Client = Depends(get_client),
    feed: ChangeFeed = Depends(get_change_feed),
):
    """
    Server-sent events: `profile` with the current profile, then again
    after every change to it.
    """
    return StreamingResponse(
        service.profile_events(feed, client, session),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache"},
    )


@router.get("/products", response_model=list[WholesaleProduct])
def list_products(
    search: str | None = Query(None, max_length=100),
    _session: Session = Depends(require_wholesale),
    client: Client = Depends(get_client),
):
    return service.list_products(client, search)


@router.get("/quotes", response_model=list[QuoteRead])
def list_quotes(
    session: Session = Depends(require_wholesale),
    client: Client = Depends(get_client),
):
    """
    Past quote requests of the caller, newest first.
    """
    return service.list_quotes(client, session)


@router.post(
    "/quotes",
    response_model=QuoteResult,
    status_code=status.HTTP_201_CREATED,
)
def submit_quote(
    payload: QuoteCreate,
    session: Session = Depends(require_wholesale),
    client: Client = Depends(get_client),
):
    return service.submit_quote(client, session, payload)
