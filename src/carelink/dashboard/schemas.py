"""Dashboard response schema."""

from __future__ import annotations

from carelink.common.schemas import CamelModel


class DashboardStats(CamelModel):
    name: str
    total_children: int = 0
    available_for_adoption: int = 0
    adopted_this_month: int = 0
    active_volunteers: int = 0
