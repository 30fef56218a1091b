"""Derived dashboard and report structures."""

from __future__ import annotations

import datetime as dt
from typing import Literal, Optional

from pydantic import BaseModel, Field

from .common import Money, Quantity

Priority = Literal["high", "medium", "low"]


class ConsumerEntry(BaseModel):
    name: str
    quantity: Quantity
    unit: str = ""


class DailyConsumption(BaseModel):
    date: dt.date
    value: Money


class CategoryShare(BaseModel):
    name: str
    value: Money
    percentage: int


class AlertsSummary(BaseModel):
    total: int = 0
    unread: int = 0
    by_type: dict[str, int] = Field(default_factory=dict)


class DashboardStats(BaseModel):
    total_items: int
    low_stock_items: int
    expired_items: int
    total_value: Money
    top_consuming_items: list[ConsumerEntry] = Field(default_factory=list)
    monthly_consumption: list[DailyConsumption] = Field(default_factory=list)
    category_distribution: list[CategoryShare] = Field(default_factory=list)
    alerts_summary: AlertsSummary = Field(default_factory=AlertsSummary)


class PerformanceRow(BaseModel):
    item: str
    consumed: Quantity
    restocked: Quantity
    efficiency: int


class ConsumptionHistoryRow(BaseModel):
    date: dt.date
    item: str
    quantity: Quantity
    cost: Money


class WasteRow(BaseModel):
    item: str
    expired: Quantity
    cost: Money
    percentage: int


class RestockRecommendation(BaseModel):
    item: str
    current: Quantity
    suggested: Quantity
    priority: Priority


class ReportData(BaseModel):
    performance_report: list[PerformanceRow] = Field(default_factory=list)
    consumption_history: list[ConsumptionHistoryRow] = Field(default_factory=list)
    waste_analysis: list[WasteRow] = Field(default_factory=list)
    restock_recommendations: list[RestockRecommendation] = Field(default_factory=list)


class DashboardSnapshot(BaseModel):
    """What the dashboard endpoint returns: the last good computation."""

    restaurant_id: int
    stats: DashboardStats
    reports: ReportData
    generated_at: dt.datetime
    stale: bool = False
    error: Optional[str] = None
