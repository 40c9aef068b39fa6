"""
interfaces/streamlit_app.py
──────────────────────────────────────────────────────────────────────────────
Streamlit operator page for INN verification.

Run:
  streamlit run innverify/interfaces/streamlit_app.py

Features:
  • Single INN: text input → status banner → company card / JSON tabs
  • Batch mode: .txt upload (one INN per line) → progress bar → table + CSV
  • Sidebar shows live cache counters (size, hits, misses)

Lookups go through the same VerificationService singleton as the CLI, so
they share its cache for the lifetime of the Streamlit process.
"""
from __future__ import annotations

import logging
import sys
import time
from pathlib import Path

import pandas as pd
import streamlit as st

# ── Path setup ─────────────────────────────────────────────────────────────
# Allow running from the repo root with: streamlit run innverify/interfaces/streamlit_app.py
_REPO_ROOT = Path(__file__).parent.parent.parent
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from innverify.domain.exceptions import InvalidFormat, TransportError
from innverify.domain.models import VerificationResult, VerificationStatus
from innverify.services.container import get_service

logger = logging.getLogger(__name__)

st.set_page_config(
    page_title="INN Verification",
    page_icon="🏢",
    layout="wide",
    initial_sidebar_state="expanded",
)

_BANNERS = {
    VerificationStatus.SUCCESS: st.success,
    VerificationStatus.WARNING: st.warning,
    VerificationStatus.ERROR:   st.error,
}


# ── Backend singleton ──────────────────────────────────────────────────────

@st.cache_resource(show_spinner="Initialising verification service…")
def _load_service():
    """Loads and caches the VerificationService for the lifetime of the app."""
    return get_service()


# ── Sidebar ────────────────────────────────────────────────────────────────

def _render_sidebar() -> str:
    with st.sidebar:
        st.markdown("## ⚙️ Options")
        mode = st.selectbox("Mode", ["Single INN", "Batch (file upload)"], key="mode")

        st.markdown("---")
        service = _load_service()
        cache = service.cache
        st.metric("Cached INNs", f"{len(cache)} / {cache.capacity}")
        stats = getattr(cache, "stats", None)
        if callable(stats):
            snapshot = stats()
            c1, c2 = st.columns(2)
            c1.metric("Hits", snapshot.hits)
            c2.metric("Misses", snapshot.misses)
        st.caption(f"Provider: {service.registry.provider_name} · TTL {cache.ttl:.0f}s")
    return mode


# ── Result rendering ───────────────────────────────────────────────────────

def _result_row(inn: str, result: VerificationResult) -> dict:
    company = result.company
    return {
        "INN": inn,
        "Status": result.status.value,
        "Message": result.message,
        "Name": company.name if company else "",
        "OGRN": company.ogrn if company else "",
        "Address": company.address if company else "",
        "OKVED": (company.okved or "") if company else "",
        "State": company.state if company else "",
    }


def _render_result(inn: str, result: VerificationResult) -> None:
    _BANNERS[result.status](result.message)
    tab_card, tab_json = st.tabs(["🏢 Company", "{ } JSON"])
    with tab_card:
        if result.company is None:
            st.info("No company record.")
        else:
            row = _result_row(inn, result)
            st.table(pd.DataFrame([row]).drop(columns=["Status", "Message"]).T)
    with tab_json:
        st.json(result.to_dict())


# ── Single INN mode ────────────────────────────────────────────────────────

def _run_single() -> None:
    st.markdown("### 🔍 Enter an INN")
    inn = st.text_input("INN", placeholder="10 or 12 digits, e.g. 7707083893")
    if not (st.button("Verify", type="primary") and inn.strip()):
        st.info("Enter an INN above and press **Verify**.")
        return

    service = _load_service()
    with st.spinner("Checking registry …"):
        t0 = time.perf_counter()
        try:
            result = service.verify(inn)
        except InvalidFormat as exc:
            st.error(exc.message)
            return
        except TransportError as exc:
            st.error(exc.message)
            if exc.details:
                st.caption(exc.details)
            return
        elapsed = time.perf_counter() - t0

    st.caption(f"Latency {elapsed:.3f}s")
    _render_result(inn.strip(), result)


# ── Batch mode ─────────────────────────────────────────────────────────────

def _run_batch() -> None:
    st.markdown("### 📂 Upload an INN list")
    st.caption("Plain text file, one INN per line. Lines starting with # are ignored.")

    uploaded = st.file_uploader("Choose a .txt file", type=["txt"])
    if uploaded is None:
        return

    raw = uploaded.read().decode("utf-8")
    inns = [l.strip() for l in raw.splitlines() if l.strip() and not l.startswith("#")]
    if not inns:
        st.warning("No INNs found in the uploaded file.")
        return
    if not st.button(f"Verify {len(inns)} INNs", type="primary"):
        return

    service = _load_service()
    rows: list[dict] = []
    progress = st.progress(0, text="Starting …")

    for idx, inn in enumerate(inns):
        try:
            rows.append(_result_row(inn, service.verify(inn)))
        except (InvalidFormat, TransportError) as exc:
            logger.warning("Batch lookup failed for %r: %s", inn, exc)
            rows.append({"INN": inn, "Status": "failed", "Message": exc.message})
        progress.progress((idx + 1) / len(inns), text=f"{idx + 1}/{len(inns)} complete")

    progress.empty()
    df = pd.DataFrame(rows)
    st.dataframe(df, use_container_width=True)
    st.download_button(
        "⬇ Download CSV",
        df.to_csv(index=False).encode(),
        file_name="inn_verification.csv",
        mime="text/csv",
    )


# ── Main ───────────────────────────────────────────────────────────────────

def main() -> None:
    st.title("🏢 INN Verification")
    st.caption("Company registry lookup with a cached proxy in front of the provider.")

    if _render_sidebar() == "Single INN":
        _run_single()
    else:
        _run_batch()


if __name__ == "__main__":
    main()
