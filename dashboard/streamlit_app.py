import os

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import requests
import streamlit as st

DEFAULT_API_BASE = "http://127.0.0.1:8000"

st.set_page_config(page_title="Portfolio Stress Testing", layout="wide")
st.title("Portfolio Stress Testing")
st.caption("Analyze portfolio performance under various market stress scenarios")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def build_auth_headers(api_key: str) -> dict[str, str]:
    if not api_key.strip():
        return {}
    return {"X-API-Key": api_key.strip()}


def safe_get(url: str, **kwargs):
    try:
        return requests.get(url, **kwargs), None
    except requests.RequestException as exc:
        return None, str(exc)


def safe_post(url: str, **kwargs):
    try:
        return requests.post(url, **kwargs), None
    except requests.RequestException as exc:
        return None, str(exc)


def fmt_money(value: float) -> str:
    return f"${value:,.0f}"


# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------

with st.sidebar:
    st.header("API")
    api_base = st.text_input("API Base URL", value=os.getenv("API_BASE", DEFAULT_API_BASE))
    api_key = st.text_input("X-API-Key", value=os.getenv("API_KEY", "change-me"), type="password")

    st.divider()
    with st.expander("About this app", expanded=False):
        st.markdown(
            """
**Portfolio Stress Testing** applies historical and hypothetical market
shocks to an asset-class portfolio and projects how long the stressed
portfolio takes to regain its pre-shock value.

- Pick a scenario and edit allocations; results recompute on every change.
- Allocations that do not total 100% are flagged but still used as given.
- The recovery timeline compounds monthly at a fixed annual rate (8% by
  default) over a 60-month horizon.

*This is a research tool, not financial advice.*
"""
        )

auth_headers = build_auth_headers(api_key)


@st.cache_data(ttl=300, show_spinner=False)
def load_catalog(base: str, headers: tuple) -> tuple[list, list]:
    hdrs = dict(headers)
    r_sc, err = safe_get(f"{base}/scenarios", headers=hdrs, timeout=10)
    if err or not r_sc.ok:
        raise RuntimeError(err or r_sc.text)
    r_pf, err = safe_get(f"{base}/stress/default-portfolio", headers=hdrs, timeout=10)
    if err or not r_pf.ok:
        raise RuntimeError(err or r_pf.text)
    return r_sc.json(), r_pf.json()


try:
    scenarios, default_holdings = load_catalog(api_base, tuple(auth_headers.items()))
except RuntimeError as exc:
    st.error(f"Could not reach API: {exc}")
    st.stop()

scenario_by_key = {s["key"]: s for s in scenarios}

if "portfolio_df" not in st.session_state:
    st.session_state.portfolio_df = pd.DataFrame(default_holdings)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

cfg_col, sc_col = st.columns([1, 1], gap="large")

with cfg_col:
    st.subheader("Portfolio Configuration")
    portfolio_value = st.number_input(
        "Portfolio Value ($)", min_value=0.0, value=1_000_000.0, step=10_000.0
    )
    edited = st.data_editor(
        st.session_state.portfolio_df,
        column_config={
            "name": st.column_config.TextColumn("Asset", disabled=True),
            "allocation_percent": st.column_config.NumberColumn("Allocation (%)", step=0.1),
            "volatility": st.column_config.NumberColumn("Volatility (%)", disabled=True),
            "beta": st.column_config.NumberColumn("Beta", disabled=True),
        },
        hide_index=True,
        use_container_width=True,
        key="portfolio_editor",
    )
    total_alloc = float(edited["allocation_percent"].sum())
    if abs(total_alloc - 100.0) < 1e-9:
        st.success(f"Total Allocation: {total_alloc:.1f}%")
    else:
        st.error(f"Total Allocation: {total_alloc:.1f}%")

with sc_col:
    st.subheader("Stress Scenario")
    scenario_key = st.selectbox(
        "Select Scenario",
        options=list(scenario_by_key),
        format_func=lambda k: scenario_by_key[k]["name"],
    )
    selected = scenario_by_key[scenario_key]
    st.markdown(f"**{selected['name']}**")
    st.caption(selected["description"])
    factors_df = pd.DataFrame(
        {"Asset": list(selected["factors"]), "Shock (%)": list(selected["factors"].values())}
    )
    st.dataframe(factors_df, hide_index=True, use_container_width=True)


# ---------------------------------------------------------------------------
# Results (recomputed on every rerun)
# ---------------------------------------------------------------------------

body = {
    "portfolio": edited.to_dict(orient="records"),
    "scenario_key": scenario_key,
    "base_value": portfolio_value,
}

tab1, tab2 = st.tabs(["Stress Test Results", "Scenario Comparison"])

with tab1:
    r, err = safe_post(f"{api_base}/stress/run", json=body, headers=auth_headers, timeout=30)
    if err:
        st.error(f"Connection error: {err}")
    elif not r.ok:
        st.error(f"API error: {r.text}")
    else:
        payload = r.json()
        summary = payload["summary"]
        worst = summary["worst_asset"]
        best = summary["best_asset"]

        m1, m2, m3, m4 = st.columns(4)
        m1.metric(
            "Total Portfolio Change",
            fmt_money(abs(summary["total_dollar_change"])),
            f"{summary['total_percent_change']:.2f}%",
        )
        m2.metric("Final Portfolio Value", fmt_money(summary["final_value"]))
        m3.metric("Worst Performing Asset", worst["name"] or "n/a", fmt_money(worst["loss"]))
        m4.metric("Best Performing Asset", best["name"] or "n/a", fmt_money(best["gain"]))

        for note in payload["notes"]:
            st.warning(note)

        impacts_df = pd.DataFrame(payload["impacts"])
        recovery_df = pd.DataFrame(payload["recovery"])

        ch1, ch2 = st.columns(2)
        with ch1:
            if not impacts_df.empty:
                fig = px.bar(
                    impacts_df,
                    x="asset_name",
                    y="contribution_to_loss_percent",
                    title="Loss Contribution by Asset",
                    labels={"asset_name": "Asset", "contribution_to_loss_percent": "Contribution (%)"},
                    color_discrete_sequence=["#dc2626"],
                )
                st.plotly_chart(fig, use_container_width=True)
        with ch2:
            fig = go.Figure()
            fig.add_trace(
                go.Scatter(
                    x=recovery_df["month"],
                    y=recovery_df["projected_value"],
                    mode="lines",
                    name="Projected value",
                    line={"color": "#2563eb", "width": 2},
                )
            )
            fig.add_hline(y=payload["base_value"], line_dash="dash", line_color="#dc2626")
            fig.update_layout(
                title=f"Recovery Timeline ({payload['annual_rate']:.0%} Annual Return)",
                xaxis_title="Months",
                yaxis_title="Portfolio Value ($)",
            )
            st.plotly_chart(fig, use_container_width=True)

        st.subheader("Detailed Asset Impact")
        if not impacts_df.empty:
            st.dataframe(
                impacts_df.rename(
                    columns={
                        "asset_name": "Asset",
                        "allocation_percent": "Allocation (%)",
                        "original_value": "Original Value",
                        "stressed_value": "Stressed Value",
                        "dollar_change": "$ Change",
                        "percent_change": "% Change",
                        "contribution_to_loss_percent": "Contribution to Loss (%)",
                    }
                ).round(2),
                hide_index=True,
                use_container_width=True,
            )
        else:
            st.info("Portfolio is empty.")

        st.subheader("Key Insights & Recommendations")
        in1, in2 = st.columns(2)
        with in1:
            st.markdown("**Risk Assessment**")
            st.markdown("\n".join(f"- {line}" for line in payload["insights"]["risk_assessment"]))
        with in2:
            st.markdown("**Potential Actions**")
            st.markdown("\n".join(f"- {line}" for line in payload["insights"]["potential_actions"]))

with tab2:
    compare_body = {"portfolio": body["portfolio"], "base_value": portfolio_value}
    r, err = safe_post(f"{api_base}/stress/compare", json=compare_body, headers=auth_headers, timeout=30)
    if err:
        st.error(f"Connection error: {err}")
    elif not r.ok:
        st.error(f"API error: {r.text}")
    else:
        compare_df = pd.DataFrame(r.json())
        fig = px.bar(
            compare_df,
            x="scenario_name",
            y="total_percent_change",
            title="Projected Portfolio Change by Scenario",
            labels={"scenario_name": "Scenario", "total_percent_change": "Change (%)"},
        )
        st.plotly_chart(fig, use_container_width=True)
        st.dataframe(compare_df.round(2), hide_index=True, use_container_width=True)
