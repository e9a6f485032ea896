import logging
import os
from decimal import Decimal

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from billing.exceptions import SubscriptionError
from billing.invoice_schedule import format_date
from billing.subscription import DEFAULT_CHARGE, Subscription

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)

app = FastAPI()

frontend_origin = os.getenv("FRONTEND_ORIGIN", "http://localhost:3000")
app.add_middleware(
    CORSMiddleware,
    allow_origins=[frontend_origin],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class SubscriptionPreviewPayload(BaseModel):
    charge: Decimal = DEFAULT_CHARGE
    subscription_type: str | None = None
    start_date: str | None = None
    end_date: str | None = None


class SubscriptionPreviewResponse(BaseModel):
    charge: Decimal
    subscription_type: str
    start_date: str
    end_date: str
    day_of_subscription: str
    invoice_dates: list[str]
    invoice_count: int
    total_charge: Decimal


def build_from_payload(payload: SubscriptionPreviewPayload) -> Subscription:
    builder = Subscription.new_builder().set_charge(payload.charge)
    if payload.subscription_type is not None:
        builder.set_subscription_type(payload.subscription_type)
    if payload.start_date is not None:
        builder.set_start_date(payload.start_date)
    if payload.end_date is not None:
        builder.set_end_date(payload.end_date)
    return builder.build()


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.post("/subscriptions/preview", response_model=SubscriptionPreviewResponse)
def preview_subscription(payload: SubscriptionPreviewPayload) -> SubscriptionPreviewResponse:
    try:
        subscription = build_from_payload(payload)
    except SubscriptionError as exc:
        logger.info("Rejected subscription preview: %s", exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    logger.debug(
        "Previewed %s subscription with %d invoices",
        subscription.subscription_type.value,
        subscription.invoice_count,
    )
    return SubscriptionPreviewResponse(
        charge=subscription.charge,
        subscription_type=subscription.subscription_type.value,
        start_date=format_date(subscription.start_date),
        end_date=format_date(subscription.end_date),
        day_of_subscription=subscription.day_of_subscription,
        invoice_dates=list(subscription.invoice_dates),
        invoice_count=subscription.invoice_count,
        total_charge=subscription.total_charge,
    )
