"""
Dispatcher: sends one draft to each destination in turn
"""
import logging
from dataclasses import dataclass
from typing import List

from apps.accounts.services import platform_name
from .services import get_platform_service
from .services.base import Destination, PostResult

logger = logging.getLogger('platforms')


@dataclass
class DispatchResult:
    destination: Destination
    result: PostResult

    @property
    def success(self) -> bool:
        return self.result.success

    @property
    def failure_line(self) -> str:
        error = " ".join((self.result.error_message or "Unknown error").split())
        return f"{platform_name(self.destination.platform)} ({self.destination.label}): {error}"

    def as_dict(self) -> dict:
        return {
            "destination_id": self.destination.id,
            "platform": self.destination.platform,
            "label": self.destination.label,
            "success": self.result.success,
            "platform_post_id": self.result.platform_post_id,
            "platform_post_url": self.result.platform_post_url,
            "error": self.result.error_message,
        }


class Dispatcher:
    """Sequential publisher loop; one failure never stops the rest"""

    def __init__(self, backend):
        self.backend = backend

    @staticmethod
    def destinations(draft) -> List[Destination]:
        """Selected accounts in selection order, then GMB locations"""
        selection = draft.selection
        destinations = [
            Destination(id=account.id, platform=account.platform, label=account.label)
            for account in selection.selected_accounts
        ]
        destinations += [
            Destination(id=location.id, platform='gmb', label=location.label,
                        social_account_id=location.social_account_id)
            for location in selection.gmb_locations.values()
        ]
        return destinations

    def dispatch(self, draft, media) -> List[DispatchResult]:
        destinations = self.destinations(draft)
        logger.info(f"[DISPATCH_START] {len(destinations)} destination(s) | Mode: {draft.mode}")

        results = []
        for destination in destinations:
            logger.info(f"[DISPATCH_ATTEMPT] {destination.platform}/{destination.label} (ID: {destination.id})")
            try:
                service = get_platform_service(destination.platform, self.backend)
            except ValueError as e:
                result = PostResult(success=False, error_message=str(e))
            else:
                result = service.publish(destination, draft, media)

            if result.success:
                logger.info(f"[DISPATCH_SUCCESS] {destination.platform}/{destination.label} | Post ID: {result.platform_post_id}")
            else:
                logger.error(f"[DISPATCH_FAILED] {destination.platform}/{destination.label} | Error: {result.error_message}")
            results.append(DispatchResult(destination=destination, result=result))

        success_count = sum(1 for r in results if r.success)
        logger.info(f"[DISPATCH_END] Success: {success_count} | Failed: {len(results) - success_count}")
        return results
