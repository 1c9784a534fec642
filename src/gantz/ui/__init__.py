"""Streamlit user interface for gantz application."""
