#!/usr/bin/env python3
"""
Example: Fetch and display account balances, fees and recent trades.

This example demonstrates how to:
1. Create an authenticated client from environment variables
2. Show balances per currency
3. Show the active fee tier and running trading volume
4. Page through recent trades using the cursor
5. Check balance and trade sequences for gaps

Prerequisites:
- Set the BITPANDA_API_TOKEN environment variable
- Install dependencies with Poetry (recommended): poetry install
- OR install bitpanda-client in development mode: pip install -e .

Usage:
    poetry run python examples/account_info.py

Environment Variables:
    BITPANDA_API_TOKEN=your_api_token_here
"""

import asyncio
import logging

from bitpanda_client import ApiError, BitpandaClient, HttpClientError, SequenceTracker

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

MAX_TRADE_PAGES = 3


def print_section_header(title: str):
    """Print a formatted section header."""
    print("\n" + "=" * 70)
    print(f" {title.upper()} ".center(70, "="))
    print("=" * 70)


async def show_balances(client: BitpandaClient, tracker: SequenceTracker):
    account = await client.get_balances()

    print_section_header("Balances")
    print(f"Account ID: {account.account_id}")
    print(f"{'Currency':<10} {'Available':>18} {'Locked':>18} {'Total':>18}")
    for balance in account.balances:
        tracker.observe_balance(balance)
        print(
            f"{balance.currency_code.value:<10} {balance.available:>18} "
            f"{balance.locked:>18} {balance.total:>18}"
        )


async def show_fees(client: BitpandaClient):
    fees = await client.get_account_fees()
    volume = await client.get_trading_volume()

    print_section_header("Fees")
    print(f"Fee group:         {fees.fee_group_id}")
    print(f"Trading volume:    {volume.volume}")
    print(f"Maker fee:         {fees.active_fee_tier.maker_fee}%")
    print(f"Taker fee:         {fees.active_fee_tier.taker_fee}%")
    print(f"Fees paid in BEST: {'yes' if fees.collect_fees_in_best else 'no'}")


async def show_trades(client: BitpandaClient, tracker: SequenceTracker):
    print_section_header("Recent Trades")

    cursor = None
    for _ in range(MAX_TRADE_PAGES):
        page = await client.get_trades(max_page_size=50, cursor=cursor)
        for entry in page.trade_history:
            trade = entry.trade
            check = tracker.observe_trade(trade)
            marker = "" if check is None or check.ok else f"  [{check.status.value}]"
            print(
                f"{trade.time:%Y-%m-%d %H:%M:%S}  {trade.side.value:<4} "
                f"{trade.amount} {trade.instrument_code.value} @ {trade.price}"
                f"  fee {entry.fee.fee_amount} {entry.fee.fee_currency.value}{marker}"
            )

        if not page.has_next_page:
            break
        cursor = page.cursor


async def main():
    """Main function to demonstrate account information retrieval."""
    client = BitpandaClient.from_env()
    if not client.config.authenticated:
        logger.error("BITPANDA_API_TOKEN is not set")
        return

    tracker = SequenceTracker()

    try:
        async with client:
            await show_balances(client, tracker)
            await show_fees(client)
            await show_trades(client, tracker)
    except ApiError as e:
        logger.error(f"Exchange rejected request ({e.status_code}): {e.error}")
    except HttpClientError as e:
        logger.error(f"Request failed: {e}")


if __name__ == "__main__":
    asyncio.run(main())
