"""
Pipeline Leak Watch: Streamlit Interface.

Run with:  streamlit run main.py
"""

import sys
import os

# Ensure the project root is on the Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import logging

import numpy as np
import streamlit as st

from data.interfaces import SimulatedFleetProvider
from data.fleet import find_entity
from data.state_io import serialize_fleet
from analytics.kpis import compute_kpis, compute_advanced_kpis
from analytics.regional import compute_regional_risk, rank_regions
from analytics.cascade import simulate_cascade
from analytics.what_if import what_if, what_if_sweep
from analytics.history import generate_history
from narrative.client import NarrativeClient, NarrativeServiceError
from visualization.plots import (
    create_fleet_map_figure,
    create_regional_risk_figure,
    create_history_figure,
    create_what_if_figure,
)
from config import DEFAULT_SEED, DEFAULT_THRESHOLD, LOG_LEVEL

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

# ── Page Config ──────────────────────────────────────────────────────────────

st.set_page_config(
    page_title="Pipeline Leak Watch",
    page_icon="🛢️",
    layout="wide",
)

st.title("Pipeline Leak Watch")
st.markdown(
    "Simulated pipeline fleet with heuristic leak-risk scoring, regional "
    "analytics, what-if scenarios and AI-generated diagnostics."
)


@st.cache_data
def load_fleet(seed: int):
    return SimulatedFleetProvider(seed=seed).get_fleet()


# ── Sidebar Controls ─────────────────────────────────────────────────────────

st.sidebar.header("Fleet")

seed = int(st.sidebar.number_input("Simulation Seed", value=DEFAULT_SEED, step=1))
threshold = st.sidebar.slider(
    "Risk Threshold",
    min_value=0.0,
    max_value=1.0,
    value=DEFAULT_THRESHOLD,
    step=0.05,
    help="Pipelines with leak probability strictly above this value count as at risk.",
)

fleet = load_fleet(seed)

st.sidebar.download_button(
    "Export Fleet (NPZ)",
    data=serialize_fleet(fleet, metadata={"seed": seed, "threshold": threshold}),
    file_name=f"fleet_seed{seed}.npz",
)

# ── KPI Row ──────────────────────────────────────────────────────────────────

kpis = compute_kpis(fleet, threshold)
advanced = compute_advanced_kpis(fleet, threshold)

m1, m2, m3, m4, m5 = st.columns(5)
m1.metric("Total Pipelines", kpis["total"])
m2.metric("At Risk", kpis["at_risk"])
m3.metric("Normal", kpis["normal"])
m4.metric("MTTR", f"{advanced['mttr_hours']}h")
m5.metric("Cost Impact", f"${advanced['cost_impact_usd'] / 1e6:.1f}M")

# ── Map + Regional Risk ──────────────────────────────────────────────────────

options = {f"{p.name} (#{p.id}, {p.leak_prob_percent:.1f}%)": p.id for p in fleet}
selected_label = st.sidebar.selectbox("Pipeline", list(options.keys()))
selected = find_entity(fleet, options[selected_label])

col_map, col_region = st.columns([3, 2])
with col_map:
    st.plotly_chart(
        create_fleet_map_figure(fleet, threshold, selected_id=selected.id),
        use_container_width=True,
    )
with col_region:
    regional = rank_regions(compute_regional_risk(fleet))
    st.plotly_chart(create_regional_risk_figure(regional), use_container_width=True)
    st.caption(
        f"Failure rate {advanced['failure_rate_pct']}% · "
        f"{advanced['total_incidents']} incidents (30d) · "
        f"{advanced['prevented_failures']} failures prevented · "
        f"avg resolution {advanced['avg_resolution_hours']}h"
    )

# ── Pipeline Detail ──────────────────────────────────────────────────────────

st.header(f"{selected.name} (ID {selected.id})")
d1, d2, d3 = st.columns(3)
d1.metric("Pressure", f"{selected.pressure_bar} bar")
d2.metric("Flow", f"{selected.flow_m3h} m³/h")
d3.metric(
    "Leak Probability",
    f"{selected.leak_prob_percent:.1f}%",
    delta="at risk" if selected.leak_prob > threshold else "normal",
    delta_color="inverse" if selected.leak_prob > threshold else "normal",
)

tab_diag, tab_whatif, tab_sim, tab_trend = st.tabs(
    ["Diagnosis", "What-If", "Simulate Failure", "Trends"]
)

with tab_diag:
    client = NarrativeClient()
    if "diagnoses" not in st.session_state:
        st.session_state.diagnoses = {}
    if "follow_ups" not in st.session_state:
        st.session_state.follow_ups = {}

    if not client.configured:
        st.info("Set OPENAI_API_KEY to enable AI diagnostics.")
    elif st.button("Generate Diagnosis"):
        try:
            with st.spinner("Analyzing pipeline..."):
                st.session_state.diagnoses[selected.id] = {
                    "diagnosis": client.diagnose(selected),
                    "root_cause": client.root_cause(selected),
                }
            st.session_state.follow_ups[selected.id] = []
        except NarrativeServiceError as e:
            logger.warning("Diagnosis failed for %s: %s", selected.name, e)
            st.error(str(e))

    stored = st.session_state.diagnoses.get(selected.id)
    if stored:
        diagnosis = stored["diagnosis"]
        root_cause = stored["root_cause"]
        st.subheader("Summary")
        st.write(diagnosis.summary)
        st.subheader("Recommended Actions")
        for i, rec in enumerate(diagnosis.recommendations, 1):
            st.markdown(f"{i}. {rec}")
        st.subheader("Root Cause")
        st.write(root_cause["cause"])
        r1, r2, r3, r4 = st.columns(4)
        r1.metric("Confidence", f"{root_cause['confidence']}%")
        r2.metric("Factors", root_cause["factors"])
        r3.metric("Repair Cost", f"${root_cause['repair_cost_usd']:,}")
        r4.metric("Failure Cost", f"${root_cause['failure_cost_usd']:,}")

    if client.configured:
        st.subheader("Ask a Follow-up Question")
        question = st.text_input("Question", key=f"follow_up_{selected.id}")
        if st.button("Ask"):
            try:
                with st.spinner("Thinking..."):
                    answer = client.follow_up(
                        selected,
                        question,
                        previous=stored["diagnosis"] if stored else None,
                    )
                st.session_state.follow_ups.setdefault(selected.id, []).append((question, answer))
            except ValueError as e:
                st.warning(str(e))
            except NarrativeServiceError as e:
                logger.warning("Follow-up failed for %s: %s", selected.name, e)
                st.error(str(e))
        for q, a in st.session_state.follow_ups.get(selected.id, []):
            st.markdown(f"**Q:** {q}")
            st.write(a)

with tab_whatif:
    attribute = st.radio("Reading", ["pressure", "flow"], horizontal=True)
    change = st.slider("Change (%)", min_value=-50, max_value=150, value=20, step=5)
    result = what_if(selected, attribute, change)
    w1, w2, w3 = st.columns(3)
    w1.metric("New Value", f"{result.new_value:.1f}")
    w2.metric("New Leak Probability", f"{result.new_leak_prob * 100:.1f}%")
    w3.metric("Risk Level", result.risk_level)
    st.write(result.recommendation)
    sweep = what_if_sweep(selected, attribute, range(-50, 155, 5))
    st.plotly_chart(create_what_if_figure(sweep), use_container_width=True)

with tab_sim:
    if st.button("Simulate Failure"):
        sim = simulate_cascade(fleet, selected.id, rng=np.random.default_rng())
        s1, s2, s3, s4 = st.columns(4)
        s1.metric("Affected", len(sim.affected_ids))
        s2.metric("Cascading Failures", sim.cascading_count)
        s3.metric("Downtime", f"{sim.downtime_hours:.0f}h")
        s4.metric("Estimated Cost", f"${sim.cost_usd / 1e6:.2f}M")
        st.write("Critical path: " + " → ".join(sim.critical_path_names))
        if not sim.affected_ids:
            st.caption("No neighbouring pipelines within the cascade radius.")

with tab_trend:
    st.plotly_chart(create_history_figure(generate_history(selected)), use_container_width=True)
