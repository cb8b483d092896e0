"""
Main Django Ninja API instance
"""
from ninja import NinjaAPI
from api.exceptions import custom_exception_handler

# Create API instance
api = NinjaAPI(
    title="Social Dashboard API",
    version="1.0.0",
    description="Compose, schedule and browse posts for Instagram, Facebook, YouTube and Google My Business",
    docs_url="/docs",
)

# Register exception handler
api.exception_handler(Exception)(custom_exception_handler)


# Health check endpoint
@api.get("/health", tags=["System"])
def health_check(request):
    return {"status": "healthy", "message": "Social Dashboard API is running"}


# Register routers
from api.router import register_routers
register_routers(api)
