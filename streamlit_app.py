import streamlit as st

from config.app_config import get_config
from services.ui_service.context import get_page_context
from services.ui_service.navigation import build_router, dispatch, render_sidebar
from utils.logging_config import initialize_logging, get_logger

# Get configuration
config = get_config()

st.set_page_config(
    page_title=config.ui.app_title,
    page_icon=config.ui.page_icon,
    layout=config.ui.layout
)

# Initialize logging and error tracking
error_tracker = initialize_logging()
logger = get_logger(__name__)

ctx = get_page_context()

# Restore the cached session before any page decides on access
ctx.auth.initialize()

render_sidebar(ctx)
dispatch(ctx, build_router())
