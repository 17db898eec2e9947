"""
Account-related models for Bitpanda client.

Immutable data structures for balances, fee schedules, deposits and
withdrawals.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union

from ..utils import format_decimal, format_time, parse_decimal, parse_time
from .enums import CurrencyCode


@dataclass(frozen=True)
class Balance:
    """Account balance for one single currency."""
    account_id: str
    currency_code: CurrencyCode
    change: Decimal
    available: Decimal
    locked: Decimal
    sequence: int
    time: datetime

    @property
    def total(self) -> Decimal:
        return self.available + self.locked

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Balance":
        return cls(
            account_id=data["account_id"],
            currency_code=CurrencyCode(data["currency_code"]),
            change=parse_decimal(data["change"]),
            available=parse_decimal(data["available"]),
            locked=parse_decimal(data["locked"]),
            sequence=int(data["sequence"]),
            time=parse_time(data["time"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "account_id": self.account_id,
            "currency_code": self.currency_code.value,
            "change": format_decimal(self.change),
            "available": format_decimal(self.available),
            "locked": format_decimal(self.locked),
            "sequence": self.sequence,
            "time": format_time(self.time),
        }


@dataclass(frozen=True)
class Account:
    """Balances of a registered user's account."""
    account_id: str
    balances: List[Balance] = field(default_factory=list)

    def balance_for(self, currency: Union[CurrencyCode, str]) -> Optional[Balance]:
        """Return the balance held in ``currency``, if any."""
        for balance in self.balances:
            if balance.currency_code == currency:
                return balance
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Account":
        return cls(
            account_id=data["account_id"],
            balances=[Balance.from_dict(item) for item in data.get("balances") or []],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "account_id": self.account_id,
            "balances": [balance.to_dict() for balance in self.balances],
        }


@dataclass(frozen=True)
class FeeTier:
    """Maker/taker fees applying from a trading volume threshold upward."""
    fee_group_id: str
    volume: Decimal
    maker_fee: Decimal
    taker_fee: Decimal

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FeeTier":
        return cls(
            fee_group_id=data["fee_group_id"],
            volume=parse_decimal(data["volume"]),
            maker_fee=parse_decimal(data["maker_fee"]),
            taker_fee=parse_decimal(data["taker_fee"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fee_group_id": self.fee_group_id,
            "volume": format_decimal(self.volume),
            "maker_fee": format_decimal(self.maker_fee),
            "taker_fee": format_decimal(self.taker_fee),
        }


def select_fee_tier(tiers: List[FeeTier], volume: Union[Decimal, str]) -> Optional[FeeTier]:
    """Pick the tier with the highest threshold not above ``volume``."""
    trading_volume = parse_decimal(volume)
    eligible = [tier for tier in tiers if tier.volume <= trading_volume]
    if not eligible:
        return None
    return max(eligible, key=lambda tier: tier.volume)


@dataclass(frozen=True)
class FeeGroup:
    """Fee schedule shared by a group of accounts."""
    fee_group_id: str
    fee_tiers: List[FeeTier]
    fee_discount_rate: Decimal
    minimum_price_value: Decimal
    display_text: Optional[str] = None

    def tier_for_volume(self, volume: Union[Decimal, str]) -> Optional[FeeTier]:
        return select_fee_tier(self.fee_tiers, volume)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FeeGroup":
        return cls(
            fee_group_id=data["fee_group_id"],
            fee_tiers=[FeeTier.from_dict(item) for item in data.get("fee_tiers") or []],
            fee_discount_rate=parse_decimal(data["fee_discount_rate"]),
            minimum_price_value=parse_decimal(data["minimum_price_value"]),
            display_text=data.get("display_text") or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"fee_group_id": self.fee_group_id}
        if self.display_text is not None:
            result["display_text"] = self.display_text
        result.update({
            "fee_tiers": [tier.to_dict() for tier in self.fee_tiers],
            "fee_discount_rate": format_decimal(self.fee_discount_rate),
            "minimum_price_value": format_decimal(self.minimum_price_value),
        })
        return result


@dataclass(frozen=True)
class AccountFees:
    """Fee details of an account, including its active tier."""
    account_id: str
    running_trading_volume: Decimal
    fee_group_id: str
    fee_tiers: List[FeeTier]
    active_fee_tier: FeeTier
    collect_fees_in_best: bool
    fee_discount_rate: Decimal
    minimum_price_value: Decimal

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AccountFees":
        return cls(
            account_id=data["account_id"],
            running_trading_volume=parse_decimal(data["running_trading_volume"]),
            fee_group_id=data["fee_group_id"],
            fee_tiers=[FeeTier.from_dict(item) for item in data.get("fee_tiers") or []],
            active_fee_tier=FeeTier.from_dict(data["active_fee_tier"]),
            collect_fees_in_best=bool(data["collect_fees_in_best"]),
            fee_discount_rate=parse_decimal(data["fee_discount_rate"]),
            minimum_price_value=parse_decimal(data["minimum_price_value"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "account_id": self.account_id,
            "running_trading_volume": format_decimal(self.running_trading_volume),
            "fee_group_id": self.fee_group_id,
            "fee_tiers": [tier.to_dict() for tier in self.fee_tiers],
            "active_fee_tier": self.active_fee_tier.to_dict(),
            "collect_fees_in_best": self.collect_fees_in_best,
            "fee_discount_rate": format_decimal(self.fee_discount_rate),
            "minimum_price_value": format_decimal(self.minimum_price_value),
        }


@dataclass(frozen=True)
class FeeMode:
    """Toggle to enable or disable fee collection with BEST."""
    collect_fees_in_best: bool

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FeeMode":
        return cls(collect_fees_in_best=bool(data["collect_fees_in_best"]))

    def to_dict(self) -> Dict[str, Any]:
        return {"collect_fees_in_best": self.collect_fees_in_best}


@dataclass(frozen=True)
class TradingVolume:
    """Running trading volume of an account."""
    volume: Decimal

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TradingVolume":
        return cls(volume=parse_decimal(data["volume"]))

    def to_dict(self) -> Dict[str, Any]:
        return {"volume": format_decimal(self.volume)}


@dataclass(frozen=True)
class DepositAddress:
    """Crypto deposit address of an account."""
    address: str
    enabled: bool
    can_create_more: bool
    is_smart_contract: bool
    destination_tag: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DepositAddress":
        return cls(
            address=data["address"],
            enabled=bool(data.get("enabled", False)),
            can_create_more=bool(data.get("can_create_more", False)),
            is_smart_contract=bool(data.get("is_smart_contract", False)),
            destination_tag=data.get("destinationTag") or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"address": self.address}
        if self.destination_tag is not None:
            result["destinationTag"] = self.destination_tag
        result.update({
            "enabled": self.enabled,
            "can_create_more": self.can_create_more,
            "is_smart_contract": self.is_smart_contract,
        })
        return result


@dataclass(frozen=True)
class FiatDepositInfo:
    """Bank transfer instructions for fiat deposits."""
    iban: str
    bic: str
    bank: str
    address: str
    receiver: str
    receiver_address: str
    unique_payment_number: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FiatDepositInfo":
        return cls(
            iban=data["iban"],
            bic=data["bic"],
            bank=data["bank"],
            address=data["address"],
            receiver=data["receiver"],
            receiver_address=data["receiver_address"],
            unique_payment_number=data["unique_payment_number"],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "iban": self.iban,
            "bic": self.bic,
            "bank": self.bank,
            "address": self.address,
            "receiver": self.receiver,
            "receiver_address": self.receiver_address,
            "unique_payment_number": self.unique_payment_number,
        }


@dataclass(frozen=True)
class Recipient:
    """Destination of a crypto withdrawal."""
    address: str
    destination_tag: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Recipient":
        return cls(
            address=data["address"],
            destination_tag=data.get("destination_tag") or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"address": self.address}
        if self.destination_tag is not None:
            result["destination_tag"] = self.destination_tag
        return result


@dataclass(frozen=True)
class Withdraw:
    """Crypto withdrawal request."""
    currency: CurrencyCode
    amount: Decimal
    recipient: Recipient

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Withdraw":
        return cls(
            currency=CurrencyCode(data["currency"]),
            amount=parse_decimal(data["amount"]),
            recipient=Recipient.from_dict(data["recipient"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "currency": self.currency.value,
            "amount": format_decimal(self.amount),
            "recipient": self.recipient.to_dict(),
        }


@dataclass(frozen=True)
class WithdrawResult:
    """Accepted crypto withdrawal."""
    amount: Decimal
    recipient: str
    fee: Decimal
    destination_tag: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WithdrawResult":
        return cls(
            amount=parse_decimal(data["amount"]),
            recipient=data["recipient"],
            fee=parse_decimal(data["fee"]),
            destination_tag=data.get("destinationTag") or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "amount": format_decimal(self.amount),
            "recipient": self.recipient,
        }
        if self.destination_tag is not None:
            result["destinationTag"] = self.destination_tag
        result["fee"] = format_decimal(self.fee)
        return result
