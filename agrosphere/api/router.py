from fastapi import APIRouter

from agrosphere.modules.connections.routes import router as connections_router
from agrosphere.modules.discovery.routes import router as discovery_router
from agrosphere.modules.finance.routes import router as finance_router
from agrosphere.modules.messaging.routes import router as messaging_router
from agrosphere.modules.notifications.router import router as notifications_router
from agrosphere.modules.users.routes import admin_router, router as users_router

api_router = APIRouter()

# discovery before users: /users/{id} would otherwise capture /users/nearby
api_router.include_router(discovery_router)
api_router.include_router(users_router)
api_router.include_router(admin_router)
api_router.include_router(connections_router)
api_router.include_router(messaging_router)
api_router.include_router(finance_router)
api_router.include_router(notifications_router)
