"""
Pydantic request/response models for the HTTP surface.

Report fields are typed Any on purpose: callers send loosely typed JSON and
the ForwardReportUseCase applies its own truthiness rules and placeholders.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class ReportRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    clientName: Any = None
    reportedPlayerName: Any = None
    reason: Any = None
    am: Any = None
    serverId: Any = None


class StockView(BaseModel):
    name: str
    price: float
    record: dict[str, float]


class ErrorResponse(BaseModel):
    error: str
    status: Optional[int] = None
