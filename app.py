"""
app.py - minimal entrypoint for Streamlit app

Keep this file tiny so streamlit can import it without side-effects.
Run the app with:
    streamlit run app.py

This module simply delegates to src.ui.dashboard.main().

"""
import os

import streamlit as _st

# If running on Streamlit Cloud, transfer secrets to env vars so src.config can read them
try:
    _secrets = dict(_st.secrets)
except FileNotFoundError:
    # no secrets.toml configured locally
    _secrets = {}
for _k in ("EXPENSES_EXPORT_LABEL", "EXPENSES_CURRENCY_SYMBOL", "EXPENSES_LOG_LEVEL"):
    if _secrets.get(_k) and _k not in os.environ:
        os.environ[_k] = str(_secrets[_k])

from src.ui import dashboard  # noqa: E402


def main():
    dashboard.main()


if __name__ == "__main__":
    main()
