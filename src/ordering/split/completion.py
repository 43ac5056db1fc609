"""Split completion — command and handler."""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.errors import ConflictError
from ordering.split.split import OrderSplit

logger = structlog.get_logger(__name__)


@ordering.command(part_of="OrderSplit")
class CompleteSplit:
    split_id = Identifier(required=True)


@ordering.command_handler(part_of=OrderSplit)
class CompleteSplitHandler:
    @handle(CompleteSplit)
    def complete_split(self, command):
        log = logger.bind(split_id=str(command.split_id))
        repo = current_domain.repository_for(OrderSplit)
        split = repo.find_active_by_id(command.split_id)
        if split is None:
            log.info("Split not found")
            return False

        try:
            split.complete()
        except ConflictError:
            log.warning("Split completion rejected", status=split.status)
            raise

        repo.add(split)
        log.info("Split completed", order_id=str(split.original_order_id))
        return True


def complete_split(split_id) -> bool:
    return current_domain.process(CompleteSplit(split_id=split_id), asynchronous=False)
