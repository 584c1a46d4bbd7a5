"""
Manifold - Interactive Life Trajectory Dashboard

Projects a starting life state forward as an ensemble of stochastic yearly
rollouts and summarizes the spread of outcomes.

Run with: streamlit run app.py
"""

import logging
from datetime import date

import streamlit as st
import plotly.graph_objects as go
import numpy as np
import pandas as pd

from manifold.config import (
    ARCHETYPE_PROFILES,
    DIMENSION_INFO,
    DIMENSIONS,
    EQUITY_CURVE,
    LIQUID_CURVE,
    OUTCOME_BUCKET_INFO,
    PATH_CATEGORY_INFO,
    SCENARIO_PRESETS,
    Archetype,
    ScheduleEntry,
    SimulationParams,
    scenario_schedule,
    year_labels,
)
from manifold.engine import ManifoldSimulator
from manifold.golden import sample_representative_paths
from manifold.state import PRESET_DESCRIPTIONS, StateVector, Vitality, format_usd, get_preset

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

# ── Page config ──────────────────────────────────────────────────────
st.set_page_config(
    page_title="Manifold",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Common layout for all charts
CHART_THEME = dict(
    template="simple_white",
    paper_bgcolor="rgba(0,0,0,0)",
    plot_bgcolor="rgba(0,0,0,0)",
    font=dict(color="#262730"),
)


# ── Helper: build line chart ─────────────────────────────────────────
def line_chart(x, y, title, yaxis, color="#1f77b4", fmt=None, milestones=None):
    fig = go.Figure()
    hover = "%{y:,.0f}" if fmt is None else fmt
    fig.add_trace(
        go.Scatter(
            x=x, y=y, mode="lines", line=dict(color=color, width=2.5),
            hovertemplate=hover + "<extra></extra>",
        )
    )
    if milestones:
        # Invisible-until-hover markers keep the chart uncluttered
        ms_x, ms_y, ms_text = [], [], []
        for m in milestones:
            label = str(m.year)
            if label in x:
                ms_x.append(label)
                ms_y.append(y[x.index(label)])
                ms_text.append(f"{m.label}: {m.description}")
        if ms_x:
            fig.add_trace(
                go.Scatter(
                    x=ms_x, y=ms_y, mode="markers",
                    marker=dict(size=9, color="red", symbol="diamond",
                                line=dict(width=1, color="#333")),
                    text=ms_text,
                    hovertemplate="%{text}<extra></extra>",
                    showlegend=False,
                )
            )
    fig.update_layout(
        **CHART_THEME,
        title=dict(text=title, font=dict(size=14)),
        yaxis_title=yaxis, height=320,
        margin=dict(l=50, r=20, t=35, b=30),
        hovermode="x unified",
    )
    return fig


def fan_chart(x, values, golden=None, golden_milestones=None):
    """Percentile bands of net worth across paths, with the golden path on top."""
    bands = np.percentile(values, [10, 25, 50, 75, 90], axis=0)
    fig = go.Figure()
    for lo, hi, alpha in [(0, 4, 0.15), (1, 3, 0.3)]:
        fig.add_trace(go.Scatter(x=x, y=bands[hi], mode="lines", line=dict(width=0),
                                 showlegend=False, hoverinfo="skip"))
        fig.add_trace(go.Scatter(
            x=x, y=bands[lo], mode="lines", line=dict(width=0), fill="tonexty",
            fillcolor=f"rgba(59,130,246,{alpha})", showlegend=False, hoverinfo="skip",
        ))
    fig.add_trace(go.Scatter(x=x, y=bands[2], mode="lines", name="Median",
                             line=dict(color="#3b82f6", width=2)))
    if golden is not None:
        golden_fig = line_chart(x, golden, "", "", color="#fbbf24", milestones=golden_milestones)
        for trace in golden_fig.data:
            trace.name = "Golden path"
            fig.add_trace(trace)
    fig.update_layout(
        **CHART_THEME,
        title=dict(text="Net Worth (10/25/50/75/90th percentile)", font=dict(size=14)),
        yaxis_title="USD", height=380,
        margin=dict(l=60, r=20, t=35, b=30),
        hovermode="x unified",
        legend=dict(orientation="h", yanchor="bottom", y=-0.3, font=dict(size=10)),
    )
    return fig


def multi_line(x, series_dict, title, yaxis, height=340):
    fig = go.Figure()
    for name, (vals, color) in series_dict.items():
        fig.add_trace(
            go.Scatter(x=x, y=vals, name=name, mode="lines", line=dict(color=color, width=2))
        )
    fig.update_layout(
        **CHART_THEME,
        title=dict(text=title, font=dict(size=14)),
        yaxis_title=yaxis, height=height,
        margin=dict(l=50, r=20, t=35, b=30),
        hovermode="x unified",
        legend=dict(orientation="h", yanchor="bottom", y=-0.35, font=dict(size=10)),
    )
    return fig


# ── Sidebar ──────────────────────────────────────────────────────────
st.sidebar.title("Simulation Controls")

scenario_name = st.sidebar.selectbox("Scenario", list(SCENARIO_PRESETS.keys()), index=0)
preset_name, overrides = SCENARIO_PRESETS[scenario_name]
defaults = SimulationParams(**overrides)

this_year = date.today().year

with st.sidebar.expander("Profile", expanded=True):
    user_age = st.slider("Age", 14, 80, 19)
    horizon = st.slider("Years to goal", 1, 40, 10)
goal_year = this_year + horizon

with st.sidebar.expander("Starting Point", expanded=False):
    state_preset = st.selectbox(
        "Preset", list(PRESET_DESCRIPTIONS.keys()),
        index=list(PRESET_DESCRIPTIONS.keys()).index(preset_name),
        format_func=lambda k: f"{k.title()} ({PRESET_DESCRIPTIONS[k]})",
    )
    base = get_preset(state_preset)
    real = base.to_real_units()
    liquid = st.number_input(
        "Liquid wealth ($)", float(LIQUID_CURVE.minimum), float(LIQUID_CURVE.maximum),
        float(round(real.liquid_wealth, -3)), step=10_000.0,
    )
    equity = st.number_input(
        "Equity ($)", float(EQUITY_CURVE.minimum), float(EQUITY_CURVE.maximum),
        float(round(real.equity, -3)), step=50_000.0,
    )
    body = st.slider("Body", 0.0, 1.0, real.body, 0.05)
    mind = st.slider("Mind", 0.0, 1.0, real.mind, 0.05)
    appearance = st.slider("Appearance", 0.0, 1.0, real.appearance, 0.05)
    intelligence = st.slider("Intelligence", 0.0, 1.0, real.intelligence, 0.05)
    status = st.slider("Status", 0.0, 1.0, real.status, 0.05)
    resilience = st.slider("Resilience", 0.0, 1.0, real.resilience, 0.05)

start_state = StateVector.from_real_units(
    liquid_wealth=liquid, equity=equity,
    vitality=Vitality(body, mind, appearance),
    intelligence=intelligence, status=status, resilience=resilience,
)

with st.sidebar.expander("Effort & Risk", expanded=True):
    effort = st.slider(
        "Effort", 0, 100, int(defaults.effort_multiplier * 100),
        help="Amplifies wealth, skill and status growth at a cost to vitality and resilience",
    )
    risk = st.slider(
        "Risk Tolerance", 0, 100, int(defaults.risk_tolerance * 100),
        help="Widens the spread of outcomes without changing their expected drift",
    )

with st.sidebar.expander("Archetype Timeline", expanded=False):
    default_schedule = scenario_schedule(scenario_name, this_year, goal_year)
    default_ids = [e.archetype for e in default_schedule]
    chosen = st.multiselect(
        "Active archetypes", list(Archetype),
        default=list(dict.fromkeys(default_ids)),
        format_func=lambda a: ARCHETYPE_PROFILES[a].name,
    )
    schedule = []
    for archetype in chosen:
        window = next(
            ((e.start_year, e.end_year) for e in default_schedule if e.archetype is archetype),
            (this_year, goal_year),
        )
        start, end = st.slider(
            ARCHETYPE_PROFILES[archetype].name, this_year, goal_year,
            (max(this_year, window[0]), min(goal_year, window[1])),
            key=f"win_{archetype.value}",
        )
        schedule.append(ScheduleEntry(archetype, start, end))

with st.sidebar.expander("Advanced", expanded=False):
    num_paths = st.slider("Ensemble Size", 0, 1000, 200, step=50)
    seed = st.number_input("Random Seed", 0, 2**31 - 1, 42, step=1)
    volatility = st.slider("Base Volatility", 0.01, 0.10, defaults.base_volatility, step=0.005)

params = SimulationParams(
    current_year=this_year,
    goal_year=goal_year,
    user_age=user_age,
    num_paths=num_paths,
    seed=int(seed),
    effort_multiplier=effort / 100,
    risk_tolerance=risk / 100,
    schedule=schedule,
    base_volatility=volatility,
)

# ── Run simulation ───────────────────────────────────────────────────
result = ManifoldSimulator(start_state, params).run()
labels = year_labels(params.years, params.current_year)

# ── Header ───────────────────────────────────────────────────────────
st.title("Manifold")
st.markdown(
    "Monte Carlo projection of a life trajectory across wealth, vitality, "
    "intelligence, status and resilience."
)

if result.statistics is None:
    st.info("Ensemble size is zero. Increase it in the sidebar to see projections.")
    st.stop()

stats = result.statistics
start_nw = start_state.net_worth()

c1, c2, c3, c4, c5 = st.columns(5)
c1.metric("Starting Net Worth", format_usd(start_nw))
c2.metric("Mean at Goal", format_usd(stats.mean_final_net_worth))
c3.metric("Median at Goal", format_usd(stats.median_final_net_worth))
c4.metric(f"Success by age {params.goal_age}", f"{stats.success_probability * 100:.0f}%",
          help=f"Net worth of at least {format_usd(params.success_net_worth)} in {params.goal_year}")
c5.metric("Burnout Risk", f"{stats.burnout_probability * 100:.0f}%", delta_color="inverse")

golden = result.golden_path
if golden is not None and golden.milestones:
    with st.expander(f"Golden Path Milestones ({len(golden.milestones)} events)", expanded=False):
        for m in golden.milestones:
            st.markdown(f"- **{m.year}**: {m.label} ({m.description})")

# ── Tabs ─────────────────────────────────────────────────────────────
tab_overview, tab_dimensions, tab_paths, tab_method = st.tabs(
    ["Overview", "Dimensions", "Paths", "Methodology"]
)

# ── TAB: Overview ────────────────────────────────────────────────────
with tab_overview:
    nw_matrix = np.array([[p.net_worth_by_year[int(y)] for y in labels] for p in result.paths])
    golden_nw = [golden.net_worth_by_year[int(y)] for y in labels] if golden else None
    st.plotly_chart(
        fan_chart(labels, nw_matrix, golden_nw, golden.milestones if golden else None),
        use_container_width=True,
    )

    col1, col2 = st.columns(2)
    with col1:
        names, probs, colors = [], [], []
        for bucket, tally in result.outcome_buckets.items():
            label, icon, color = OUTCOME_BUCKET_INFO[bucket]
            names.append(f"{icon} {label}")
            probs.append(tally.probability * 100)
            colors.append(color)
        fig = go.Figure(go.Bar(x=probs, y=names, orientation="h", marker_color=colors,
                               hovertemplate="%{x:.1f}%<extra></extra>"))
        fig.update_layout(**CHART_THEME, title=dict(text="Outcome Probabilities (%)", font=dict(size=14)),
                          height=300, margin=dict(l=110, r=20, t=35, b=30), xaxis_range=[0, 100])
        st.plotly_chart(fig, use_container_width=True)
    with col2:
        cat_rows = [
            {
                "Category": PATH_CATEGORY_INFO[c].label,
                "Paths": n,
                "Share (%)": f"{n / len(result.paths) * 100:.1f}",
                "Description": PATH_CATEGORY_INFO[c].description,
            }
            for c, n in result.category_counts.items()
        ]
        st.subheader("Path Categories")
        st.dataframe(pd.DataFrame(cat_rows), hide_index=True, use_container_width=True)

# ── TAB: Dimensions ──────────────────────────────────────────────────
with tab_dimensions:
    series = {
        DIMENSION_INFO[d].name: ([s.to_array()[k] for s in result.mean_path], DIMENSION_INFO[d].color)
        for k, d in enumerate(DIMENSIONS)
    }
    st.plotly_chart(
        multi_line(labels, series, "Mean Path (normalized dimensions)", "0-1"),
        use_container_width=True,
    )
    if golden is not None:
        final = golden.final_state.to_real_units()
        st.subheader(f"Golden Path in {params.goal_year}")
        g1, g2, g3, g4 = st.columns(4)
        g1.metric("Net Worth", format_usd(final.net_worth), final.wealth_tier.value.title())
        g2.metric("Body / Mind", f"{final.body_label} / {final.mind_label}")
        g3.metric("Intelligence / Status", f"{final.intelligence_label} / {final.status_label}")
        g4.metric("Resilience", final.resilience_label)

# ── TAB: Paths ───────────────────────────────────────────────────────
with tab_paths:
    sample = sample_representative_paths(result, 50)
    rows = [
        {
            "Path": p.id,
            "Category": PATH_CATEGORY_INFO[p.category].label,
            "Final Net Worth": format_usd(p.final_net_worth),
            "Risk": round(p.risk_score, 3),
            "Min Resilience": round(p.min_resilience, 3),
            "Weight (%)": round(p.probability * 100, 3),
            "Milestones": ", ".join(m.label for m in p.milestones),
            "Golden": golden is not None and p.id == golden.id,
        }
        for p in sample
    ]
    st.dataframe(pd.DataFrame(rows), hide_index=True, use_container_width=True)

    if result.milestone_probabilities:
        st.subheader("Milestone Probabilities")
        ms_df = pd.DataFrame(
            [{"Milestone": k, "Paths reaching (%)": round(v * 100, 1)}
             for k, v in result.milestone_probabilities.items()]
        )
        st.dataframe(ms_df, hide_index=True, use_container_width=True)

# ── TAB: Methodology ─────────────────────────────────────────────────
with tab_method:
    st.header("Model Structure")
    st.markdown("""
Each path moves through the six normalized dimensions one year at a time:

1. **Drift**: passive drift plus the active archetypes' drift. Effort amplifies gains in wealth, intelligence and status.
2. **Stress**: effort costs vitality and resilience, growing with the square of effort.
3. **Couplings**: low vitality accelerates resilience loss; very low intelligence dampens status growth.
4. **Noise**: normal shocks whose spread grows with risk tolerance and archetype volatility. Wealth noise is centred in dollars, so risk widens outcomes without raising the average.

Wealth maps to dollars on power curves (liquid: -$100K to $10M, equity: $0 to $50M).
""")
    st.header("Archetypes")
    st.dataframe(
        pd.DataFrame([
            {"Archetype": prof.name, "Description": prof.description,
             "Drift": ", ".join(f"{k} {v:+.3f}" for k, v in prof.drift.items())}
            for prof in ARCHETYPE_PROFILES.values()
        ]),
        hide_index=True, use_container_width=True,
    )

    # ── Sensitivity Analysis ──────────────────────────────────────
    st.header("Sensitivity Analysis")
    st.markdown(
        "Effort and risk tolerance are each moved **±0.2** from current settings "
        "with the same seed. Bars show how the goal-year outcome shifts."
    )

    @st.cache_data
    def run_sensitivity(state_dims, vitality, params_dict, schedule_rows):
        """Re-run the ensemble with one control nudged at a time and return deltas."""
        start = StateVector.from_dimensions(*state_dims, vitality=Vitality(*vitality))

        def outcome(**overrides):
            p = SimulationParams(**{**params_dict, **overrides}, schedule=list(schedule_rows))
            s = ManifoldSimulator(start, p).run().statistics
            return s.success_probability, s.burnout_probability

        base_success, base_burnout = outcome()
        rows = []
        for attr, label in [("effort_multiplier", "Effort"), ("risk_tolerance", "Risk Tolerance")]:
            for direction, step in [("-0.2", -0.2), ("+0.2", 0.2)]:
                success, burnout = outcome(**{attr: params_dict[attr] + step})
                rows.append({
                    "param": f"{label} {direction}",
                    "success_delta": (success - base_success) * 100,
                    "burnout_delta": (burnout - base_burnout) * 100,
                })
        return rows

    _sweep_keys = [
        "current_year", "goal_year", "user_age", "num_paths", "seed",
        "effort_multiplier", "risk_tolerance", "base_volatility",
    ]
    with st.spinner("Running sensitivity sweeps..."):
        sens = pd.DataFrame(run_sensitivity(
            (start_state.Wl, start_state.We, start_state.V, start_state.I, start_state.S, start_state.R),
            (start_state.vitality.body, start_state.vitality.mind, start_state.vitality.appearance),
            {k: getattr(params, k) for k in _sweep_keys},
            tuple((e.archetype.value, e.start_year, e.end_year) for e in params.schedule),
        ))

    fig = go.Figure()
    fig.add_trace(go.Bar(y=sens["param"], x=sens["success_delta"], orientation="h",
                         name="Success (pp)", marker_color="#22c55e"))
    fig.add_trace(go.Bar(y=sens["param"], x=sens["burnout_delta"], orientation="h",
                         name="Burnout (pp)", marker_color="#ef4444"))
    fig.update_layout(
        **CHART_THEME, barmode="group", height=320,
        title=dict(text="Change vs. baseline (percentage points)", font=dict(size=14)),
        margin=dict(l=120, r=20, t=35, b=30),
        legend=dict(orientation="h", yanchor="bottom", y=-0.3, font=dict(size=10)),
    )
    st.plotly_chart(fig, use_container_width=True)

# ── Footer ───────────────────────────────────────────────────────────
st.divider()
st.caption(
    "This is a stylized model for exploring trade-offs, not a financial or "
    "actuarial forecast. Parameters can be tuned in the sidebar."
)
