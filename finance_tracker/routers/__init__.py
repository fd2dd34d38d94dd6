# finance_tracker/routers/__init__.py
# Router package initialization

"""
API Routers for the Finance Tracker application.

- users: registration, login, logout, token issuance and profile
- transactions: transaction CRUD and summaries
"""
