from fastapi import APIRouter

from zexpos.api.v1.routers import auth as auth_router
from zexpos.api.v1.routers import setup as setup_router
from zexpos.api.v1.routers import organizations as organizations_router
from zexpos.api.v1.routers import restaurants as restaurants_router
from zexpos.api.v1.routers import staff as staff_router
from zexpos.api.v1.routers import menu as menu_router
from zexpos.api.v1.routers import tables as tables_router
from zexpos.api.v1.routers import orders as orders_router
from zexpos.api.v1.routers import order_items as order_items_router
from zexpos.api.v1.routers import receipts as receipts_router
from zexpos.api.v1.routers import receipt_templates as receipt_templates_router

router = APIRouter()

# public/auth routes
router.include_router(auth_router.router)
router.include_router(setup_router.router)

# back office
router.include_router(organizations_router.router)
router.include_router(restaurants_router.router)
router.include_router(staff_router.router)
router.include_router(menu_router.router)
router.include_router(tables_router.router)

# floor
router.include_router(orders_router.router)
router.include_router(order_items_router.router)
router.include_router(receipts_router.router)
router.include_router(receipt_templates_router.router)
