"""
API Router Registration
"""


def register_routers(api):
    """Register all API routers"""

    # Session endpoints
    from apps.auth.api import router as auth_router
    api.add_router("/auth/", auth_router, tags=["Authentication"])

    # Account directory
    from apps.accounts.api import router as accounts_router
    api.add_router("/social-accounts/", accounts_router, tags=["Social Accounts"])

    # Composer + dispatch
    from apps.posts.api import router as posts_router
    api.add_router("/posts/", posts_router, tags=["Posts"])

    # Media uploads
    from apps.media.api import router as media_router
    api.add_router("/media/", media_router, tags=["Media"])

    # Calendar / day planner / upcoming
    from apps.planner.api import router as planner_router
    api.add_router("/planner/", planner_router, tags=["Planner"])

    # Media library
    from apps.library.api import router as library_router
    api.add_router("/library/", library_router, tags=["Media Library"])

    # Google My Business
    from apps.gmb.api import router as gmb_router
    api.add_router("/gmb/", gmb_router, tags=["Google My Business"])

    # Alerts feed
    from apps.notifications.api import router as alerts_router
    api.add_router("/alerts/", alerts_router, tags=["Alerts"])
