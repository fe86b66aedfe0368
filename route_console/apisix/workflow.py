"""
Route List Workflows
Pagination model and the delete confirmation state machine
"""

import logging
import math
from typing import Optional

from .models import APISIXRoute, DeleteStatus, DeleteWorkflowState

logger = logging.getLogger(__name__)


class Pagination:
    """1-based page cursor over a listing of ``total`` items"""

    def __init__(self, page_size: int = 10, page: int = 1, total: int = 0):
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self.page_size = page_size
        self.page = max(1, page)
        self.total = max(0, total)

    @property
    def total_pages(self) -> int:
        return self.pages_for(self.page_size)

    def pages_for(self, page_size: int) -> int:
        """Number of pages the current total fills at ``page_size``"""
        return max(1, math.ceil(self.total / page_size))

    def clamp(self, page: int, page_size: Optional[int] = None) -> int:
        return min(max(1, page), self.pages_for(page_size or self.page_size))

    def go_to_page(self, page: int) -> int:
        self.page = self.clamp(page)
        return self.page

    def next_page(self) -> int:
        return self.go_to_page(self.page + 1)

    def previous_page(self) -> int:
        return self.go_to_page(self.page - 1)

    def set_page_size(self, page_size: int) -> None:
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self.page_size = page_size
        self.page = 1

    def __repr__(self) -> str:
        return f"Pagination(page={self.page}, page_size={self.page_size}, total={self.total})"


class DeleteWorkflow:
    """
    Delete confirmation dialog

    Closed -> Open(X) on request, Open(X) -> Deleting(X) on confirm.
    Deleting ends in Closed on success or back in Open(X) with the error
    kept on failure, so the operator can retry or cancel. Cancel is refused
    while a delete is in flight.
    """

    def __init__(self):
        self.state = DeleteWorkflowState()

    @property
    def status(self) -> DeleteStatus:
        return self.state.status

    @property
    def target(self) -> Optional[APISIXRoute]:
        return self.state.target

    def request(self, route: APISIXRoute) -> DeleteWorkflowState:
        if self.state.status == DeleteStatus.DELETING:
            logger.warning("Ignoring delete request while another delete is in flight")
            return self.state
        self.state = DeleteWorkflowState(status=DeleteStatus.OPEN, target=route)
        return self.state

    def begin(self) -> bool:
        """Open -> Deleting; False when there is nothing to confirm"""
        if self.state.status != DeleteStatus.OPEN:
            return False
        self.state = DeleteWorkflowState(status=DeleteStatus.DELETING, target=self.state.target)
        return True

    def succeed(self) -> DeleteWorkflowState:
        self.state = DeleteWorkflowState()
        return self.state

    def fail(self, message: str) -> DeleteWorkflowState:
        self.state = DeleteWorkflowState(status=DeleteStatus.OPEN, target=self.state.target, error=message)
        return self.state

    def cancel(self) -> bool:
        if self.state.status == DeleteStatus.DELETING:
            logger.warning("Cannot close the delete dialog while the delete is in progress")
            return False
        self.state = DeleteWorkflowState()
        return True
