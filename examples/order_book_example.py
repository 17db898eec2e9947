"""
Order Book Example

This example demonstrates:
- Fetching order book snapshots at levels 1, 2 and 3
- Displaying best bid/ask prices and amounts
- Analyzing spread and liquidity
- Fetching recent candlesticks for the same instrument

No API token required.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from bitpanda_client import (
    BitpandaClient,
    Granularity,
    OrderBookLevel,
    TimeUnit,
    create_bitpanda_client,
)

DISPLAY_ROWS = 5


def format_order_book_row(price: Decimal, amount: Decimal) -> str:
    """Format a single order book row for display."""
    return f"   Price: {price:>12,.2f}  |  Amount: {amount:>12,.4f}"


async def display_top_of_book(client: BitpandaClient, instrument_code: str):
    """Level 1 returns only the best bid and ask."""
    book = await client.get_order_book(instrument_code, OrderBookLevel.ONE)

    print(f"\n📈 {instrument_code} top of book at {book.time:%H:%M:%S}")
    print(f"   Best Bid: {book.bids.value.price:>12,.2f}  |  {book.bids.value.amount:>12,.4f}")
    print(f"   Best Ask: {book.asks.value.price:>12,.2f}  |  {book.asks.value.amount:>12,.4f}")
    print(f"   Spread:   {book.spread:>12,.2f}")


async def display_order_book(client: BitpandaClient, instrument_code: str):
    """Level 2 aggregates orders per price."""
    book = await client.get_order_book(instrument_code, OrderBookLevel.TWO)

    if book.best_bid is None or book.best_ask is None:
        print("⚠️  Order book is empty")
        return

    mid_price = (book.best_bid.price + book.best_ask.price) / 2
    spread_pct = (book.spread / book.best_bid.price) * 100

    print("=" * 70)
    print(f"📊 {instrument_code} Order Book")
    print("=" * 70)
    print(f"   Mid Price:     {mid_price:,.2f}")
    print(f"   Spread:        {book.spread:,.2f} ({spread_pct:.4f}%)")

    print(f"\n🔴 TOP {min(DISPLAY_ROWS, len(book.asks))} ASKS:")
    for ask in reversed(book.asks[:DISPLAY_ROWS]):
        print(format_order_book_row(ask.price, ask.amount))

    print(f"\n🟢 TOP {min(DISPLAY_ROWS, len(book.bids))} BIDS:")
    for bid in book.bids[:DISPLAY_ROWS]:
        print(format_order_book_row(bid.price, bid.amount))

    total_bid_amount = sum((bid.amount for bid in book.bids), Decimal(0))
    total_ask_amount = sum((ask.amount for ask in book.asks), Decimal(0))
    print("\n📊 LIQUIDITY SUMMARY:")
    print(f"   Total Bid Amount:  {total_bid_amount:,.4f}")
    print(f"   Total Ask Amount:  {total_ask_amount:,.4f}")


async def display_order_count(client: BitpandaClient, instrument_code: str):
    """Level 3 lists every resting order individually."""
    book = await client.get_order_book(instrument_code, OrderBookLevel.THREE)
    print(f"\n🔬 {len(book.bids)} bid orders and {len(book.asks)} ask orders resting")


async def display_candles(client: BitpandaClient, instrument_code: str):
    to_time = datetime.now(timezone.utc)
    from_time = to_time - timedelta(hours=1)
    candles = await client.get_candlesticks(
        instrument_code, Granularity(TimeUnit.MINUTES, 15), from_time, to_time
    )

    print("\n🕯  LAST HOUR (15 minute candles):")
    for candle in candles:
        print(
            f"   {candle.time:%H:%M}  O {candle.open}  H {candle.high}  "
            f"L {candle.low}  C {candle.close}  V {candle.volume}"
        )


async def main():
    """Main example function."""
    instrument_code = "BTC_EUR"

    async with create_bitpanda_client() as client:
        await display_top_of_book(client, instrument_code)
        await display_order_book(client, instrument_code)
        await display_order_count(client, instrument_code)
        await display_candles(client, instrument_code)

    print("\n✅ Example completed!\n")


if __name__ == "__main__":
    asyncio.run(main())
