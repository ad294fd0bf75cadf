# exchange/services/__init__.py
"""
Endpoint clients:
- general.GeneralClient: ping, server time, exchange info
- market.MarketDataClient: order book, trades, klines, tickers
- account.AccountClient: orders, OCO lists, balances, fills (signed)
- user_data.UserDataClient: listen key lifecycle
- withdrawal.WithdrawalClient: withdrawals, deposits, sub accounts (signed)
"""
