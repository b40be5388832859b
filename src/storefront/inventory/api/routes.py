"""FastAPI endpoints for the Inventory domain."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.identity.access import Actor
from storefront.identity.api.dependencies import current_actor
from storefront.inventory.api.schemas import AdjustStockRequest, StockAdjustedResponse
from storefront.inventory.stock.adjustment import AdjustStock, StockLevel, list_inventory

router = APIRouter(prefix="/admin/inventory", tags=["admin"])


@router.get("", response_model=list[StockLevel])
async def stock_sheet(actor: Actor = Depends(current_actor)) -> list[StockLevel]:
    return list_inventory(actor)


@router.put("/adjust", response_model=StockAdjustedResponse)
async def adjust_stock(body: AdjustStockRequest, actor: Actor = Depends(current_actor)) -> StockAdjustedResponse:
    command = AdjustStock(
        product_id=body.product_id,
        delta=body.delta,
        size=(body.size or "").strip() or None,
        **actor.stamp(),
    )
    result = current_domain.process(command, asynchronous=False)
    return StockAdjustedResponse(**result)
