"""Response envelope shared by the workflow HTTP routes."""

from typing import Generic, TypeVar

from pydantic import BaseModel

PayloadT = TypeVar("PayloadT")


class ApiResponse(BaseModel, Generic[PayloadT]):
    """Wraps a prediction, plan or learning result under ``data``."""

    data: PayloadT
