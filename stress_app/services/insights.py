"""Human-readable notes that accompany a stress test result."""
from __future__ import annotations

from stress_app.services.stress import PortfolioSummary

POTENTIAL_ACTIONS: tuple[str, ...] = (
    "Consider reducing allocation to high-risk assets.",
    "Evaluate adding defensive positions.",
    "Review client risk tolerance vs. portfolio risk.",
    "Consider hedging strategies for downside protection.",
)


def build_insights(
    summary: PortfolioSummary,
    recovery_months: int | None,
    horizon_months: int,
) -> dict[str, list[str]]:
    """Risk-assessment notes for *summary* plus the standing list of potential actions."""
    change = summary.total_percent_change
    if change < 0:
        risk = [f"Portfolio would lose {abs(change):.1f}% in this scenario."]
    else:
        risk = [f"Portfolio would gain {change:.1f}% in this scenario."]

    if recovery_months is None:
        risk.append(f"Portfolio does not recover its original value within {horizon_months} months.")
    elif recovery_months == 0:
        risk.append("Portfolio stays at or above its original value; no recovery needed.")
    else:
        risk.append(f"Recovery to original value would take approximately {recovery_months} months.")

    if summary.worst_asset.name:
        risk.append(f"{summary.worst_asset.name} contributes most to portfolio risk.")

    return {"risk_assessment": risk, "potential_actions": list(POTENTIAL_ACTIONS)}
