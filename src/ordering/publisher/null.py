"""No-op publisher used when no downstream consumer is configured."""

import structlog

from ordering.publisher.port import SplitEventPublisher

logger = structlog.get_logger(__name__)


class NullSplitPublisher(SplitEventPublisher):
    def publish(self, event_type: str, payload: dict) -> None:
        logger.debug("Split event not published (null publisher)", event_type=event_type)
