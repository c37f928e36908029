"""
Dashboard Stats Use Case
"""

from fashop.domains.marketplace.application.ports import DashboardStats, IStatsRepository


class GetDashboardStatsUseCase:
    """Headline numbers for the back office: orders, catalog, suppliers and margin earned."""

    def __init__(self, stats_repository: IStatsRepository):
        self.stats_repository = stats_repository

    async def execute(self, top_suppliers: int = 5) -> DashboardStats:
        return await self.stats_repository.dashboard(top_suppliers=top_suppliers)
