# deltacare/services/wholesale_service.py
import logging
import uuid
from typing import AsyncIterator

from fastapi import HTTPException, status
from fastapi.concurrency import run_in_threadpool
from supabase import Client

from deltacare.core.errors import REMOTE_ERRORS, UNIQUE_VIOLATION, error_code, remote_failure
from deltacare.core.realtime import ChangeFeed
from deltacare.repositories.booking_repo import SubmissionRepository
from deltacare.repositories.wholesale_repo import WholesaleRepository
from deltacare.schemas.auth import Session
from deltacare.schemas.wholesale import (
    VERIFICATION_PENDING,
    QuoteCreate,
    QuoteRead,
    QuoteResult,
    WholesaleDashboard,
    WholesaleProduct,
    WholesaleProfile,
    WholesaleProfileCreate,
    WholesaleStats,
    WholesaleTab,
)
from deltacare.services.booking_service import submit_once

logger = logging.getLogger(__name__)


def sse_frame(event: str, data: str) -> str:
    """One server-sent event."""
    return f"event: {event}\ndata: {data}\n\n"


class WholesaleService:
    """
    Wholesale buyers: registration, verification gate, product list,
    quote requests and live profile updates.
    """

    def __init__(self, repo: WholesaleRepository, submissions: SubmissionRepository):
        self.repo = repo
        self.submissions = submissions

    # ----- Profile -----

    def get_profile(self, client: Client, session: Session) -> WholesaleProfile | None:
        try:
            row = self.repo.get_profile(client, session.user_id)
        except REMOTE_ERRORS as exc:
            logger.error("Error fetching wholesale profile for %s: %s", session.user_id, exc)
            raise remote_failure("Failed to load wholesale profile")
        return WholesaleProfile.model_validate(row) if row else None

    def register(
        self,
        client: Client,
        session: Session,
        payload: WholesaleProfileCreate,
    ) -> WholesaleProfile:
        """
        Create the caller's business profile (unverified).

        - 409 if the caller already has one.
        """
        row = payload.model_dump()
        row.update({"user_id": str(session.user_id), "is_verified": False})
        try:
            stored = self.repo.create_profile(client, row)
        except REMOTE_ERRORS as exc:
            if error_code(exc) == UNIQUE_VIOLATION:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="Wholesale profile already exists",
                )
            logger.error("Wholesale registration failed for %s: %s", session.user_id, exc)
            raise remote_failure("Failed to register business")
        return WholesaleProfile.model_validate(stored)

    # ----- Dashboard -----

    def dashboard(self, client: Client, session: Session, tab: WholesaleTab) -> WholesaleDashboard:
        """
        Gate:
          1. no profile          => needs_registration
          2. profile unverified  => pending_verification (profile only)
          3. verified            => data for the requested tab
        """
        profile = self.get_profile(client, session)
        if profile is None:
            return WholesaleDashboard(status="needs_registration", tab=tab)

        if not profile.is_verified:
            return WholesaleDashboard(
                status="pending_verification",
                tab=tab,
                profile=profile,
                notice=VERIFICATION_PENDING,
            )

        result = WholesaleDashboard(status="verified", tab=tab, profile=profile)
        if tab == "products":
            result.products = self.list_products(client)
        elif tab == "quotes":
            result.quotes = self.list_quotes(client, session)
        elif tab == "dashboard":
            quotes = self.list_quotes(client, session)
            result.stats = WholesaleStats(
                total_quotes=len(quotes),
                pending_quotes=sum(1 for q in quotes if q.status == "pending"),
            )
        return result

    # ----- Products -----

    def list_products(self, client: Client, search: str | None = None) -> list[WholesaleProduct]:
        search = (search or "").strip() or None
        try:
            rows = self.repo.list_products(client, search)
        except REMOTE_ERRORS as exc:
            logger.error("Error fetching wholesale products: %s", exc)
            raise remote_failure("Failed to load products")
        return [WholesaleProduct.model_validate(row) for row in rows]

    # ----- Quotes -----

    def list_quotes(self, client: Client, session: Session) -> list[QuoteRead]:
        try:
            rows = self.submissions.list_for_user(client, "quote_requests", session.user_id)
        except REMOTE_ERRORS as exc:
            logger.error("Error fetching quotes for %s: %s", session.user_id, exc)
            raise remote_failure("Failed to load quotes")
        return [QuoteRead.model_validate(row) for row in rows]

    def submit_quote(self, client: Client, session: Session, payload: QuoteCreate) -> QuoteResult:
        request_id = payload.request_id or uuid.uuid4()
        row = {
            "user_id": str(session.user_id),
            "items": [item.model_dump() for item in payload.items],
            "notes": (payload.notes or "").strip() or None,
            "status": "pending",
            "client_request_id": str(request_id),
        }
        stored = submit_once(
            self.submissions, client, "quote_requests", row, "Failed to submit quote request"
        )
        return QuoteResult(
            quote=QuoteRead.model_validate(stored),
            message="Quote request submitted successfully!",
        )

    # ----- Live profile -----

    async def profile_events(
        self,
        feed: ChangeFeed,
        client: Client,
        session: Session,
    ) -> AsyncIterator[str]:
        """
        Server-sent events carrying the caller's profile: the current one
        first, then a fresh read after every change to the profile row
        (e.g. an admin verifying the business).
        """
        yield await self._profile_frame(client, session)

        changes = feed.observe(
            "wholesale_profiles",
            filter=f"user_id=eq.{session.user_id}",
            event="UPDATE",
            access_token=session.access_token,
        )
        async for _change in changes:
            yield await self._profile_frame(client, session)

    async def _profile_frame(self, client: Client, session: Session) -> str:
        try:
            row = await run_in_threadpool(self.repo.get_profile, client, session.user_id)
        except REMOTE_ERRORS as exc:
            logger.error("Profile refetch failed for %s: %s", session.user_id, exc)
            return sse_frame("error", '"Failed to load wholesale profile"')
        if row is None:
            return sse_frame("profile", "null")
        return sse_frame("profile", WholesaleProfile.model_validate(row).model_dump_json())
