"""
APISIX Route Manager
Handles route CRUD operations, paging and the delete workflow
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .client import ApiClient
from .errors import ConsoleError, RouteValidationError, UnexpectedResponseShape
from .form import from_wire, new_route, to_payload, validate_payload
from .models import APISIXRoute, DeleteWorkflowState, RouteListPage, RouteNode
from .workflow import DeleteWorkflow, Pagination

logger = logging.getLogger(__name__)


class RouteManager:
    """
    Manager for APISIX route operations

    Holds the state of the route list the operator is looking at: the
    current page, the last error, and the delete dialog. Only the most
    recently issued list (and get) request may update that state; a slower
    response to an earlier request is returned to its caller but otherwise
    dropped.
    """

    def __init__(self, client: ApiClient, page_size: int = 10):
        self.client = client
        self.pagination = Pagination(page_size=page_size)
        self.deletion = DeleteWorkflow()
        self.items: List[RouteNode] = []
        self.error: Optional[str] = None
        self.loading = False
        self.current_route: Optional[APISIXRoute] = None
        self._list_seq = 0
        self._total_known = False
        self._get_seq = 0

    # Listing

    async def list_routes(self, page: Optional[int] = None, page_size: Optional[int] = None) -> RouteListPage:
        """Fetch one page of routes"""
        page_size = page_size if page_size is not None else self.pagination.page_size
        page = page if page is not None else self.pagination.page
        if self._total_known:
            page = self.pagination.clamp(page, page_size)
        else:
            page = max(1, page)

        self._list_seq += 1
        seq = self._list_seq
        self.loading = True
        self.error = None

        try:
            data = await self.client.get(f"/routes?page={page}&page_size={page_size}")
            result = self._parse_list(data, page, page_size)
        except ConsoleError as e:
            if seq == self._list_seq:
                logger.error(f"Failed to fetch routes: {e.message}")
                self.error = e.message
                self.loading = False
            raise

        if seq != self._list_seq:
            logger.debug(f"Discarding stale route list response for page {page}")
            return result

        self.items = result.items
        self.pagination.page_size = page_size
        self.pagination.page = page
        self.pagination.total = result.total
        self.error = result.error
        self.loading = False

        if result.error is None:
            self._total_known = True
            if page > self.pagination.total_pages:
                # The page ran past the end, e.g. its last route was just deleted
                logger.debug(f"Page {page} is past the last page, loading page {self.pagination.total_pages}")
                return await self.list_routes(self.pagination.total_pages)
        return result

    @staticmethod
    def _parse_list(data: Any, page: int, page_size: int) -> RouteListPage:
        if isinstance(data, dict) and isinstance(data.get("list"), list):
            try:
                items = [
                    RouteNode(
                        key=node["key"],
                        value=from_wire(node["value"]),
                        modifiedIndex=node.get("modifiedIndex"),
                        createdIndex=node.get("createdIndex"),
                    )
                    for node in data["list"]
                ]
            except (KeyError, TypeError, ValidationError) as e:
                raise UnexpectedResponseShape(data=data) from e
            total = data.get("total") or len(items)
            return RouteListPage(items=items, total=total, page=page, page_size=page_size)

        if isinstance(data, dict) and data.get("error_msg"):
            return RouteListPage(page=page, page_size=page_size, error=data["error_msg"])

        raise UnexpectedResponseShape(data=data)

    async def refresh(self) -> RouteListPage:
        """Re-fetch the current page"""
        return await self.list_routes()

    async def next_page(self) -> RouteListPage:
        self.pagination.next_page()
        return await self.list_routes()

    async def previous_page(self) -> RouteListPage:
        self.pagination.previous_page()
        return await self.list_routes()

    async def go_to_page(self, page: int) -> RouteListPage:
        self.pagination.go_to_page(page)
        return await self.list_routes()

    async def set_page_size(self, page_size: int) -> RouteListPage:
        self.pagination.set_page_size(page_size)
        return await self.list_routes()

    def current_page(self) -> RouteListPage:
        """The page as last committed, without a request"""
        return RouteListPage(
            items=self.items,
            total=self.pagination.total,
            page=self.pagination.page,
            page_size=self.pagination.page_size,
            error=self.error
        )

    # Single route

    def new_route(self) -> APISIXRoute:
        return new_route()

    async def get_route(self, route_id: str) -> APISIXRoute:
        """Get a specific route, normalized for editing"""
        self._get_seq += 1
        seq = self._get_seq

        data = await self.client.get(f"/routes/{route_id}")
        if not isinstance(data, dict) or not isinstance(data.get("value"), dict):
            raise UnexpectedResponseShape(data=data)

        try:
            route = from_wire(data["value"])
        except ValidationError as e:
            raise UnexpectedResponseShape(f"Route {route_id} could not be read: {e}", data=data) from e

        if seq == self._get_seq:
            self.current_route = route
        return route

    async def create_route(self, route: APISIXRoute) -> Dict[str, Any]:
        """Create a route; APISIX assigns the id unless the route carries one"""
        payload = validate_payload(to_payload(route))

        if not route.id:
            logger.info("Creating route with server-assigned id")
            return await self.client.post("/routes", payload)

        logger.info(f"Creating route {route.id}")
        return await self.client.put(f"/routes/{route.id}", payload)

    async def update_route(self, route_id: str, route: APISIXRoute) -> Dict[str, Any]:
        """Replace an existing route"""
        payload = validate_payload(to_payload(route))
        logger.info(f"Updating route {route_id}")
        return await self.client.put(f"/routes/{route_id}", payload)

    async def delete_route(self, route_id: str) -> None:
        """Delete a route and refresh the current page"""
        await self.client.delete(f"/routes/{route_id}")
        logger.info(f"Deleted route {route_id}")

        try:
            await self.refresh()
        except ConsoleError as e:
            logger.warning(f"Route {route_id} deleted but the list refresh failed: {e.message}")

    # Delete confirmation

    def request_delete(self, route: APISIXRoute) -> DeleteWorkflowState:
        if not route.id:
            raise RouteValidationError("Only saved routes can be deleted.")
        return self.deletion.request(route)

    def cancel_delete(self) -> bool:
        """Close the dialog; refused while the delete is in flight"""
        return self.deletion.cancel()

    async def confirm_delete(self) -> DeleteWorkflowState:
        """Delete the route the dialog is open for"""
        if not self.deletion.begin():
            return self.deletion.state

        target = self.deletion.target
        self.error = None
        try:
            await self.delete_route(target.id)
        except ConsoleError as e:
            logger.error(f"Failed to delete route {target.id}: {e.message}")
            self.error = e.message
            return self.deletion.fail(e.message)

        return self.deletion.succeed()
