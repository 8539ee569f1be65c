from fastapi import APIRouter

from jobtracker.api.routes import applications, auth, health, jobs, tracker

api_router = APIRouter()
api_router.include_router(health.router, tags=["health"])
api_router.include_router(auth.router, prefix="/api/auth", tags=["auth"])
api_router.include_router(jobs.router, prefix="/api/jobs", tags=["jobs"])
api_router.include_router(applications.router, prefix="/api/applications", tags=["applications"])
api_router.include_router(tracker.router, prefix="/api/tracker", tags=["legacy"])
