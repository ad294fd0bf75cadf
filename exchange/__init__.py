# exchange/__init__.py
"""
Exchange client package.

Provides:
- Wire enums and the shared request parameter record (with HMAC signing)
- Request kinds, each exposing only the setters its endpoint accepts
- Endpoint clients for general, market data, account, user data and withdrawals
"""
