from pydantic import BaseModel, Field, field_validator

from stress_app.config import settings


class AssetHoldingIn(BaseModel):
    name: str = Field(min_length=1, max_length=64)
    allocation_percent: float
    volatility: float = 0.0
    beta: float = 0.0


class PortfolioRequest(BaseModel):
    portfolio: list[AssetHoldingIn]
    base_value: float = settings.default_base_value
    annual_rate: float | None = Field(default=None, description="Recovery growth rate, e.g. 0.08")

    @field_validator("portfolio")
    @classmethod
    def unique_names(cls, value: list[AssetHoldingIn]) -> list[AssetHoldingIn]:
        seen: set[str] = set()
        for holding in value:
            if holding.name in seen:
                raise ValueError(f"Duplicate asset name {holding.name!r}")
            seen.add(holding.name)
        return value


class StressTestRequest(PortfolioRequest):
    scenario_key: str = settings.default_scenario


class ScenarioOut(BaseModel):
    key: str
    name: str
    description: str
    factors: dict[str, float]


class AssetImpactOut(BaseModel):
    asset_name: str
    allocation_percent: float
    original_value: float
    stressed_value: float
    dollar_change: float
    percent_change: float
    contribution_to_loss_percent: float


class WorstAssetOut(BaseModel):
    name: str
    loss: float


class BestAssetOut(BaseModel):
    name: str
    gain: float


class PortfolioSummaryOut(BaseModel):
    total_dollar_change: float
    total_percent_change: float
    worst_asset: WorstAssetOut
    best_asset: BestAssetOut
    final_value: float


class RecoveryPointOut(BaseModel):
    month: int
    projected_value: float
    has_recovered: bool


class Insights(BaseModel):
    risk_assessment: list[str]
    potential_actions: list[str]


class StressTestResponse(BaseModel):
    scenario: ScenarioOut
    base_value: float
    annual_rate: float
    total_allocation: float
    allocation_complete: bool
    impacts: list[AssetImpactOut]
    summary: PortfolioSummaryOut
    recovery: list[RecoveryPointOut]
    months_to_recovery: int | None
    insights: Insights
    notes: list[str]


class ScenarioComparisonOut(BaseModel):
    scenario_key: str
    scenario_name: str
    total_dollar_change: float
    total_percent_change: float
    final_value: float
    worst_asset: str
    months_to_recovery: int | None
