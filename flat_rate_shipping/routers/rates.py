import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from ..errors import NotImplementedFault
from ..lookups import build_context
from ..rate_pipeline import collect_shipping_rates, split_rates
from ..schemas import RatesRequest, RatesResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/shipping", tags=["shipping-rates"])


@router.post("/rates", response_model=RatesResponse)
def get_shipping_rates(request: RatesRequest, db: Session = Depends(get_db)):
    """
    Runs every rate provider over the cart.

    Error entries come back next to the quotes with a 200; only a
    configuration the pipeline cannot honor fails the request.
    """
    shop_id = request.shop_id or request.cart.shop_id or settings.DEFAULT_SHOP_ID
    context = build_context(db, shop_id)
    try:
        result = collect_shipping_rates(context, request.cart)
    except NotImplementedFault as e:
        logger.error(f"Shipping rates unavailable for shop {shop_id}: {e.message}")
        raise HTTPException(status_code=501, detail=e.to_dict())

    quotes, errors = split_rates(result)
    return RatesResponse(
        rates=result.rates,
        retrial_targets=result.retrial_targets,
        quotes=quotes,
        errors=errors,
    )
