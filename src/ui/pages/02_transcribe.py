"""
Transcribe page — send a recording or audio file to the relay.

UX flow: idle -> processing -> completed
"""

# Ensure project root is on sys.path (Streamlit page files need this).
import sys as _sys; from pathlib import Path as _Path; _r = str(_Path(__file__).resolve().parents[3]); _r in _sys.path or _sys.path.insert(0, _r)  # noqa: E702,I001

import streamlit as st  # noqa: E402

from src.ui.components.recorder import render_recorder  # noqa: E402
from src.ui.utils import get_controller  # noqa: E402

st.header("Transcribe")
render_recorder(get_controller())
