import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from restaurant_os.config import settings
from restaurant_os.api import health
from restaurant_os.api.routes.menu import router as menu_router
from restaurant_os.api.routes.orders import router as orders_router
from restaurant_os.api.routes.payments import router as payments_router
from restaurant_os.api.routes.public import router as public_router
from restaurant_os.api.routes.realtime import router as realtime_router
from restaurant_os.api.routes.shifts import router as shifts_router
from restaurant_os.api.routes.staff import router as staff_router
from restaurant_os.api.routes.tables import router as tables_router
from restaurant_os.api.routes.tenants import admin_router as tenants_admin_router
from restaurant_os.api.routes.tenants import router as tenants_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("RestaurantOS started")
    yield
    logger.info("RestaurantOS stopped")


app = FastAPI(title="RestaurantOS", lifespan=lifespan)

app.include_router(health.router)
app.include_router(public_router)
app.include_router(tenants_admin_router)
app.include_router(tenants_router)
app.include_router(menu_router)
app.include_router(tables_router)
app.include_router(orders_router)
app.include_router(payments_router)
app.include_router(staff_router)
app.include_router(shifts_router)
app.include_router(realtime_router)
