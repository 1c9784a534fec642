"""
gantz - Personal photo, memo and people web application with Streamlit

A small personal site with:
- Photo gallery with incremental loading, stored in Google Cloud Storage
- Memo board with visitor comments
- People directory with free-form key/value extras
- Records kept in DuckDB
- Single admin account gated through a password identity provider
"""

__version__ = "0.1.0"
__author__ = "gantz"
__description__ = "Personal photo, memo and people web application with Streamlit"
