"""Dependency injection for FastAPI endpoints"""

from typing import Any, Optional, TypeVar

from fastapi import Request
from pydantic import BaseModel

from trustlend.api.middleware import REQUEST_ID_HEADER
from trustlend.api.v1.schemas import PricingTableSchema
from trustlend.domain.models import PricingTable
from trustlend.domain.parameters import default_pricing_table

RequestModel = TypeVar("RequestModel", bound=BaseModel)


def get_request_id(request: Request) -> str:
    """Request ID set by RequestIDMiddleware, else the caller's header"""
    return getattr(request.state, "request_id", None) or request.headers.get(REQUEST_ID_HEADER, "unknown")


def resolve_pricing_table(table: Optional[PricingTableSchema]) -> PricingTable:
    """Use the caller's table, or hand the engine the seed table explicitly"""
    if table is None:
        return default_pricing_table()
    return table.to_domain()


def with_defaults(request_body: RequestModel, **defaults: Any) -> RequestModel:
    """
    Copy of the request with omitted fields filled from defaults.

    Handlers hash the returned model, so the decision hash covers the clock
    and configured values the engine actually used.
    """
    missing = {name: value for name, value in defaults.items() if getattr(request_body, name) is None}
    if not missing:
        return request_body
    return request_body.model_copy(update=missing)
