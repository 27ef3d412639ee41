from fastapi import APIRouter

from agency.api.routers import (
    agents,
    cheques,
    companies,
    customers,
    policies,
    pricing,
    road_services,
)

api_router = APIRouter()

api_router.include_router(customers.router)
api_router.include_router(companies.router)
api_router.include_router(agents.router)
api_router.include_router(policies.router)
api_router.include_router(cheques.router)
api_router.include_router(pricing.router)
api_router.include_router(road_services.router)
