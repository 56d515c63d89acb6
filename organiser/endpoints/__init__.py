"""API endpoints for the Interview Organiser."""

from fastapi import APIRouter

from .auth import router as auth_router
from .health import router as health_router
from .interviews import router as interviews_router
from .candidates import router as candidates_router
from .interviewers import router as interviewers_router
from .organisations import router as organisations_router
from .users import router as users_router
from .feedback import router as feedback_router
from .dashboard import router as dashboard_router

# Create main API router
api_router = APIRouter()

# Include all routers
api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])
api_router.include_router(health_router, prefix="/health", tags=["Health"])
api_router.include_router(interviews_router, prefix="/interviews", tags=["Interviews"])
api_router.include_router(candidates_router, prefix="/candidates", tags=["Candidates"])
api_router.include_router(interviewers_router, prefix="/interviewers", tags=["Interviewers"])
api_router.include_router(organisations_router, prefix="/organisations", tags=["Organisations"])
api_router.include_router(users_router, prefix="/users", tags=["Users"])
api_router.include_router(feedback_router, prefix="/feedback", tags=["Feedback"])
api_router.include_router(dashboard_router, prefix="/dashboard", tags=["Dashboard"])

__all__ = ["api_router"]
