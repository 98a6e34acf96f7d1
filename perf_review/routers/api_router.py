from fastapi import APIRouter
from perf_review.routers import auth, reviews, admin

# Centralized API router hub
# Routers are aggregated here, and main.py only imports this single hub.
api_router = APIRouter()

api_router.include_router(auth.router, tags=["Authentication"])
api_router.include_router(reviews.router, tags=["Performance Reviews"])
api_router.include_router(reviews.team_router, tags=["Team"])
api_router.include_router(reviews.hr_router, tags=["HR"])
api_router.include_router(admin.router, tags=["Administration"])
