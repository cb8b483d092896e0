from .base import BasePlatformService, Destination, PostResult
from .facebook import FacebookService
from .gmb import GmbService
from .instagram import InstagramService
from .youtube import YouTubeService

__all__ = [
    'BasePlatformService', 'Destination', 'PostResult',
    'FacebookService', 'InstagramService', 'YouTubeService', 'GmbService',
    'get_platform_service',
]


def get_platform_service(platform: str, backend):
    """
    Factory function to get the appropriate publisher for a platform
    """
    services = {
        'facebook': FacebookService,
        'instagram': InstagramService,
        'youtube': YouTubeService,
        'gmb': GmbService,
    }

    service_class = services.get(platform)
    if not service_class:
        raise ValueError(f"Unsupported platform: {platform}")

    return service_class(backend)
