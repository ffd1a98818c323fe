"""
Sales router: record orders that feed the best/worst seller statistics.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from bistro.core.deps import authenticate_with_restaurant
from bistro.core.negotiation import NegotiatedRoute
from bistro.db.session import get_db
from bistro.models.user import User
from bistro.schemas.sale import SaleCreate, SaleResponse
from bistro.services.sales import SaleService

router = APIRouter(prefix="/sales", tags=["restaurant", "sales"], route_class=NegotiatedRoute)


@router.post("", response_model=SaleResponse, status_code=status.HTTP_201_CREATED, summary="Record a sale")
def record_sale(
    sale_data: SaleCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(authenticate_with_restaurant),
):
    """
    Record a sale of one or more menu items.

    Every line must reference an item of the caller's restaurant.
    """
    sale = SaleService(db).record(current_user.restaurant.id, sale_data.items)
    return SaleResponse.model_validate(sale)
