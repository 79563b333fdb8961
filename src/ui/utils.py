"""UI utility functions."""

import logging

import streamlit as st

from src.core.config import get_settings
from src.core.exceptions import SuaraError
from src.ui.api_client import APIError, get_api_client
from src.ui.controller import SpeechController

logger = logging.getLogger(__name__)


def get_controller() -> SpeechController:
    """Return this browser session's controller, detecting engines on first use."""
    if "controller" not in st.session_state:
        st.session_state.controller = SpeechController.detect(get_settings())
    return st.session_state.controller


def reset_controller() -> None:
    """Release all engine handles and start over on the next rerun."""
    controller = st.session_state.pop("controller", None)
    if controller is not None:
        controller.close()


def current_client():
    """API client for the URL entered in the sidebar."""
    settings = get_settings()
    return get_api_client(
        st.session_state.get("api_base_url", settings.api_base_url),
        settings.api_timeout,
    )


def run_action(action, *args, **kwargs):
    """Run a controller action, showing failures as an alert.

    Returns the action's result, or None when it failed.
    """
    try:
        return action(*args, **kwargs)
    except (SuaraError, APIError) as exc:
        message = exc.detail if isinstance(exc, SuaraError) else exc.message
        logger.warning("UI action %s failed: %s", getattr(action, "__name__", action), message)
        st.error(message)
        return None
