"""
Speech page — read text aloud, listen, and record.

Columns: Text to Speech | Speech to Text | Voice settings
"""

# Ensure project root is on sys.path (Streamlit page files need this).
import sys as _sys; from pathlib import Path as _Path; _r = str(_Path(__file__).resolve().parents[3]); _r in _sys.path or _sys.path.insert(0, _r)  # noqa: E702,I001

import streamlit as st  # noqa: E402

from src.ui.components.listener import render_listener  # noqa: E402
from src.ui.components.speaker import render_speaker  # noqa: E402
from src.ui.components.voice_settings import render_voice_settings  # noqa: E402
from src.ui.utils import get_controller  # noqa: E402

st.header("TTS & STT & STS")
st.caption("Read text aloud, dictate, and record in Bahasa Indonesia.")

controller = get_controller()
tts_col, stt_col, settings_col = st.columns([2, 2, 1])

with settings_col:
    st.subheader("⚙️ Voice")
    render_voice_settings(controller)

with tts_col:
    st.subheader("\U0001f50a Text to Speech")
    render_speaker(controller)

# Rendered last: while listening this column blocks in the recognition loop
with stt_col:
    st.subheader("\U0001f3a4 Speech to Text")
    render_listener(controller)
