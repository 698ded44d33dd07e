"""
PowerWhip Configurator — pattern lines to order-entry spreadsheets.

Run with:  streamlit run app.py
"""

from datetime import datetime

import pandas as pd
import streamlit as st
import yaml

from powerwhip.distribution import generate_distribution_patterns, parse_specification
from powerwhip.loader import RULES_PATH, LookupTableError, load_lookup_upload
from powerwhip.lookup import LookupResolver
from powerwhip.matching import BatchResult
from powerwhip.order_entry import order_entry_frame, order_entry_workbook, presal_frame
from powerwhip.parser import CatalogResolver


# ── Config ─────────────────────────────────────────────────

@st.cache_data
def cached_load_rules():
    with open(RULES_PATH) as f:
        return yaml.safe_load(f)


PIPELINES = {
    "Receptacle catalog": "catalog",
    "MasterBubbleLookup file": "lookup",
}


# ── Helpers ────────────────────────────────────────────────

def _results_frame(batch: BatchResult) -> pd.DataFrame:
    rows = []
    for idx, r in enumerate(batch.results, start=1):
        af = r.auto_fill
        rows.append({
            "#": idx,
            "Input": r.input_pattern,
            "Qty": r.generated_row_count,
            "Receptacle": af.receptacle,
            "Conduit": af.cable_type,
            "Whip": af.whip_length,
            "Tail": af.tail_length,
            "Voltage": af.voltage,
            "AWG": af.conductor_awg,
            "Status": "matched" if r.matched else "defaults",
            "Confidence": f"{af.confidence:.0%}" if af.confidence is not None else "---",
            "Note": af.error or "",
        })
    return pd.DataFrame(rows)


def _confidence_color(confidence: float) -> str:
    if confidence >= 0.8:
        return "green"
    elif confidence >= 0.6:
        return "orange"
    return "red"


# ── Page setup ─────────────────────────────────────────────

st.set_page_config(page_title="PowerWhip Configurator", page_icon="P", layout="wide")

rules = cached_load_rules()

# ── Sidebar ────────────────────────────────────────────────

with st.sidebar:
    st.title("PowerWhip Configurator")

    pipeline_name = st.radio("Resolve patterns against", options=list(PIPELINES.keys()))
    pipeline = PIPELINES[pipeline_name]

    with st.expander("Reference Lookup File", expanded=pipeline == "lookup"):
        uploaded = st.file_uploader(
            "MasterBubbleLookup spreadsheet",
            type=[ext.lstrip(".") for ext in rules["supported_extensions"]],
            help="First sheet, header row required. Needs at least a receptacle column.",
        )
        if uploaded:
            upload_key = (uploaded.name, uploaded.size)
            if st.session_state.get("_lookup_key") != upload_key:
                # Replace the table wholesale; never patch a loaded one
                st.session_state.pop("lookup_table", None)
                st.session_state.pop("lookup_error", None)
                try:
                    st.session_state.lookup_table = load_lookup_upload(uploaded, rules)
                except LookupTableError as e:
                    st.session_state.lookup_error = str(e)
                st.session_state._lookup_key = upload_key

        if st.session_state.get("lookup_error"):
            st.error(st.session_state.lookup_error)
        table = st.session_state.get("lookup_table")
        if table is not None:
            summary = table.summary()
            c1, c2 = st.columns(2)
            c1.metric("Rows", f"{summary['rows']:,}")
            c2.metric("Receptacles", f"{summary['receptacles']:,}")
            st.caption(f"Columns: {', '.join(summary['columns_mapped'])}")
            for w in table.warnings:
                st.caption(w)

    if st.button("Clear Results", use_container_width=True):
        st.session_state.pop("batch", None)
        st.rerun()


# ── Main content ───────────────────────────────────────────

patterns_tab, spec_tab, output_tab = st.tabs(["Patterns", "Natural Language", "Order Entry"])

with patterns_tab:
    pattern_text = st.text_area(
        "One pattern per line",
        height=200,
        placeholder="CS8269A, LMZC, 20, 10, Red\n460R9W, Metal Conduit, 50ft, Pigtail 10\nL6-30R!2",
    )
    if st.button("Process Patterns", type="primary"):
        if pipeline == "lookup":
            table = st.session_state.get("lookup_table")
            if table is None:
                st.error("Upload a valid MasterBubbleLookup file first.")
            else:
                st.session_state.batch = LookupResolver(table).process(pattern_text)
        else:
            st.session_state.batch = CatalogResolver().process(pattern_text)

    st.markdown(
        """
        **Pattern format:** `receptacle, conduit, whip length, tail length, label color!quantity`

        - `CS8269A, LMZC, 20, 10, Red`
        - `460R9W, Metal Conduit, 50ft, Pigtail 10`
        - `L6-20R!3` -- three identical rows
        - Tab or space separated lines work too when there are no commas
        """
    )

with spec_tab:
    spec_text = st.text_area(
        "Describe the order",
        height=160,
        placeholder="120 power whips total\nIEC pin and sleeve, liquid tight conduit\nlengths 20-80\nred, orange, blue, yellow",
    )
    if spec_text.strip():
        spec = parse_specification(spec_text, rules)
        generated = generate_distribution_patterns(spec, compact=True)
        st.caption(
            f"{spec.total_quantity} whips | {spec.receptacle_type} | {spec.conduit_type} | "
            f"lengths {', '.join(str(v) for v in spec.lengths)} | colors {', '.join(spec.colors)}"
        )
        if spec.features:
            st.caption("Features: " + ", ".join(spec.features))
        if generated:
            st.code("\n".join(generated))
            if st.button("Resolve Generated Patterns"):
                st.session_state.batch = CatalogResolver().process(generated)
        else:
            st.info("No total quantity found. Try e.g. \"120 power whips total\".")

with output_tab:
    batch: BatchResult | None = st.session_state.get("batch")
    if batch is None or not batch.results:
        st.info("Process some patterns to build order-entry rows.")
    else:
        s = batch.summary()
        c1, c2, c3, c4 = st.columns(4)
        c1.metric("Patterns", s["patterns"])
        c2.metric("Matched", s["matched"])
        c3.metric("Defaulted", s["defaulted"])
        c4.metric("Rows", s["rows"])

        st.dataframe(_results_frame(batch), use_container_width=True, hide_index=True)

        low = [r for r in batch.results
               if r.auto_fill.confidence is not None and r.auto_fill.confidence < 0.8]
        if low:
            with st.expander(f"Review ({len(low)} low-confidence lines)"):
                for r in low:
                    color = _confidence_color(r.auto_fill.confidence)
                    st.markdown(f"`{r.input_pattern}` :{color}[{r.auto_fill.confidence:.0%}]")

        if batch.warnings:
            with st.expander("Defaulted Lines", expanded=False):
                for w in batch.warnings:
                    st.warning(w)

        st.markdown("**Order Entry**")
        st.dataframe(order_entry_frame(batch.results), use_container_width=True, hide_index=True)
        if batch.source == "catalog":
            st.markdown("**PreSal**")
            st.dataframe(presal_frame(batch.results), use_container_width=True, hide_index=True)

        st.download_button(
            "Download Order Entry (.xlsx)",
            data=order_entry_workbook(batch.results),
            file_name=f"MasterBubbleTransformed_{datetime.now().strftime('%Y%m%d')}.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            use_container_width=True,
        )
