# exchange/services/withdrawal.py
from __future__ import annotations

from typing import Optional

import aiohttp

from exchange.capabilities import (
    AccountStatusParams,
    ApiStatusParams,
    AssetDetailParams,
    AssetDividendParams,
    DepositAddressParams,
    DepositHistoryParams,
    DustlogParams,
    DustTransferParams,
    SubAccountAssetsParams,
    SubAccountParams,
    SubAccountTransferParams,
    SystemStatusParams,
    TradeFeeParams,
    TransferHistoryParams,
    WithdrawHistoryParams,
    WithdrawParams,
)
from exchange.models import Credentials, Number
from exchange.services.base import BaseClient
from exchange.services.endpoints import BINANCE_US_URL


class WithdrawalClient(BaseClient):
    """Withdrawals, deposits, wallet status and sub accounts. Signed."""
    auth = "signed"

    @classmethod
    def connect(cls,
                api_key: str,
                secret_key: str,
                url: str = BINANCE_US_URL,
                *,
                session: Optional[aiohttp.ClientSession] = None,
                ) -> "WithdrawalClient":
        return cls._connect(url, Credentials(api_key=api_key, secret_key=secret_key), session)

    def withdraw(self, asset: str, address: str, amount: Number) -> WithdrawParams:
        return self._request(WithdrawParams, "POST", self.endpoints.withdraw,
                             asset=asset, address=address, amount=amount)

    def get_deposit_history(self) -> DepositHistoryParams:
        return self._request(DepositHistoryParams, "GET", self.endpoints.deposit_history)

    def get_withdraw_history(self) -> WithdrawHistoryParams:
        return self._request(WithdrawHistoryParams, "GET", self.endpoints.withdraw_history)

    def get_deposit_address(self, asset: str) -> DepositAddressParams:
        return self._request(DepositAddressParams, "GET", self.endpoints.deposit_address, asset=asset)

    def get_account_status(self) -> AccountStatusParams:
        return self._request(AccountStatusParams, "GET", self.endpoints.account_status)

    def get_system_status(self) -> SystemStatusParams:
        return self._request(SystemStatusParams, "GET", self.endpoints.system_status)

    def get_api_status(self) -> ApiStatusParams:
        return self._request(ApiStatusParams, "GET", self.endpoints.api_trading_status)

    def get_dustlog(self) -> DustlogParams:
        return self._request(DustlogParams, "GET", self.endpoints.dustlog)

    def get_trade_fee(self) -> TradeFeeParams:
        return self._request(TradeFeeParams, "GET", self.endpoints.trade_fee)

    def get_asset_detail(self) -> AssetDetailParams:
        return self._request(AssetDetailParams, "GET", self.endpoints.asset_detail)

    def get_sub_accounts(self) -> SubAccountParams:
        return self._request(SubAccountParams, "GET", self.endpoints.sub_account_list)

    def get_transfer_history(self, email: str) -> TransferHistoryParams:
        return self._request(TransferHistoryParams, "GET", self.endpoints.sub_account_transfer_history, email=email)

    def transfer_sub_account(self, from_email: str, to_email: str, asset: str,
                             amount: Number) -> SubAccountTransferParams:
        return self._request(
            SubAccountTransferParams, "POST", self.endpoints.sub_account_transfer,
            from_email=from_email, to_email=to_email, asset=asset, amount=amount,
        )

    def get_sub_account_assets(self, email: str) -> SubAccountAssetsParams:
        return self._request(SubAccountAssetsParams, "GET", self.endpoints.sub_account_assets, email=email)

    def dust_transfer(self, asset: str) -> DustTransferParams:
        return self._request(DustTransferParams, "POST", self.endpoints.dust_transfer, asset=asset)

    def get_asset_dividends(self) -> AssetDividendParams:
        return self._request(AssetDividendParams, "GET", self.endpoints.asset_dividend)
