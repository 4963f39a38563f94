"""Streamlit views for the worker portal and dashboard."""
