"""
Suara Streamlit UI — main entry point.

Run with: ``streamlit run src/ui/app.py``
"""

# ---------------------------------------------------------------------------
# Ensure project root is on sys.path so ``from src.xxx`` imports work.
# Streamlit replaces sys.path[0] with the script directory (src/ui/),
# which removes the project root needed for absolute ``src.*`` imports.
# ---------------------------------------------------------------------------
import sys  # noqa: E402
from pathlib import Path  # noqa: E402

_project_root = str(Path(__file__).resolve().parent.parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

import streamlit as st  # noqa: E402

from src.core.config import get_settings  # noqa: E402

# ---------------------------------------------------------------------------
# Page config (must be first Streamlit call)
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="Suara",
    page_icon="\U0001f50a",
    layout="wide",
)

# ---------------------------------------------------------------------------
# Session state defaults
# ---------------------------------------------------------------------------
_settings = get_settings()
_DEFAULTS = {
    "api_base_url": _settings.api_base_url,
    "transcribe_status": "idle",
}

for key, value in _DEFAULTS.items():
    if key not in st.session_state:
        st.session_state[key] = value

# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------
from src.ui.utils import current_client, get_controller, reset_controller  # noqa: E402

with st.sidebar:
    st.title("\U0001f50a Suara")
    st.caption("TTS & STT & STS")
    st.divider()
    st.session_state.api_base_url = st.text_input(
        "Backend API URL",
        value=st.session_state.api_base_url,
        help="URL of the Suara transcription relay (default: http://localhost:8000)",
    )

    # Connection status indicator
    _conn_ok, _conn_msg = current_client().check_connection()
    if _conn_ok:
        st.success(f"Backend: {_conn_msg}")
    else:
        st.error(f"Backend: {_conn_msg}")

    # Engine availability
    st.divider()
    st.subheader("Speech engines")
    _controller = get_controller()
    for _name, _label in (
        ("synthesis", "Speech synthesis"),
        ("recognition", "Speech recognition"),
        ("recording", "Microphone recording"),
    ):
        _reason = _controller.capability_reason(_name)
        if _reason is None:
            st.caption(f"✅ {_label}")
        else:
            st.caption(f"⚠️ {_label}: {_reason}")

    if st.button("Reset session", use_container_width=True):
        reset_controller()
        st.rerun()

# ---------------------------------------------------------------------------
# Navigation (multipage)
# ---------------------------------------------------------------------------
speech_page = st.Page(
    "pages/01_speech.py",
    title="Speech",
    icon="\U0001f3a4",
    default=True,
)
transcribe_page = st.Page(
    "pages/02_transcribe.py",
    title="Transcribe",
    icon="\U0001f4dd",
)

nav = st.navigation([speech_page, transcribe_page])
nav.run()
