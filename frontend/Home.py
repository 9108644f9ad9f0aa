"""
Home - AI Governance Console.

Landing page with overview and quick navigation.

Run from repo root:
    streamlit run frontend/Home.py
"""

import sys
from pathlib import Path

# Add repo root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import streamlit as st

from governance.config import get_settings

settings = get_settings()

# -----------------------------------------------------------------------------
# Page Configuration
# -----------------------------------------------------------------------------

st.set_page_config(
    page_title="Home",
    page_icon="🏠",
    layout="wide",
)

# -----------------------------------------------------------------------------
# Header
# -----------------------------------------------------------------------------

st.title(settings.app_name)

st.markdown("""
**Governance for AI-policy compliance**

Explore the guidelines knowledge graph, ask the assistant about policies,
and see which policy nodes each answer draws on.
""")

st.divider()

# -----------------------------------------------------------------------------
# Quick Navigation
# -----------------------------------------------------------------------------

st.header("Quick Navigation")

nav_col1, nav_col2 = st.columns(2)

with nav_col1:
    st.markdown("### Guidelines Guru")
    st.caption("Chat with the guidelines assistant, highlight related policies in the graph")
    st.page_link("pages/1_Guidelines_Guru.py", label="Open Guidelines Guru", icon="🧭")

with nav_col2:
    st.markdown("### Backend")
    st.caption(f"Graph, query and feedback endpoints at `{settings.api_base_url}`")

st.divider()

# -----------------------------------------------------------------------------
# Node Tiers
# -----------------------------------------------------------------------------

st.header("Node Tiers")

st.markdown("""
| Tier | Meaning |
|------|---------|
| **Policy** | Top-level policy area, e.g. Privacy |
| **Category** | Group of related guidelines, e.g. Ethics |
| **Subcategory** | Narrower guideline area, e.g. PII Detection |
| **Rule** | A concrete enforceable rule |
| **ProductType** | Product or model family a guideline applies to |
""")
