"""
Per-request GraphQL context.

The context is a plain dict built for each request by the router's context
getter (or directly by tests)::

    {
        "request": <HTTP connection or None>,
        "unit_of_work": <callable returning a fresh UnitOfWork>,
        "publisher": <ChangePublisher>,
        "loaders": <Loaders bound to this request>,
    }
"""

from typing import Any

import strawberry

from ..database.unit_of_work import SqlAlchemyUnitOfWork, UnitOfWork
from ..events.publisher import ChangePublisher, get_publisher
from .loaders import Loaders, UnitOfWorkFactory


def build_context(
    request: Any = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    publisher: ChangePublisher | None = None,
) -> dict[str, Any]:
    factory = unit_of_work_factory or SqlAlchemyUnitOfWork
    return {
        "request": request,
        "unit_of_work": factory,
        "publisher": publisher or get_publisher(),
        "loaders": Loaders(factory),
    }


def new_unit_of_work(info: strawberry.Info) -> UnitOfWork:
    """Create a fresh unit of work for one operation."""
    return info.context["unit_of_work"]()


def get_publisher_from_info(info: strawberry.Info) -> ChangePublisher:
    return info.context["publisher"]


def get_loaders(info: strawberry.Info) -> Loaders:
    return info.context["loaders"]
