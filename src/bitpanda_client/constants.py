"""
Constants for the Bitpanda client.
"""

# API Configuration
DEFAULT_BASE_URL = "https://api.exchange.bitpanda.com/public"
DEFAULT_TIMEOUT = 30.0
USER_AGENT = "bitpanda-client/0.1"

# Environment variables read by BitpandaClient.from_env
ENV_API_TOKEN = "BITPANDA_API_TOKEN"
ENV_BASE_URL = "BITPANDA_BASE_URL"
ENV_TIMEOUT = "BITPANDA_TIMEOUT"

# Pagination
MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 100

# Candlestick periods
PERIOD_ONE_MINUTE = 1
PERIOD_FIVE_MINUTES = 5
PERIOD_FIFTEEN_MINUTES = 15
PERIOD_THIRTY_MINUTES = 30
PERIOD_ONE_HOUR = 1
PERIOD_FOUR_HOURS = 4
PERIOD_ONE_DAY = 1
PERIOD_ONE_WEEK = 1
PERIOD_ONE_MONTH = 1

# Supported candlestick resolutions: unit -> allowed periods
SUPPORTED_PERIODS = {
    "MINUTES": (
        PERIOD_ONE_MINUTE,
        PERIOD_FIVE_MINUTES,
        PERIOD_FIFTEEN_MINUTES,
        PERIOD_THIRTY_MINUTES,
    ),
    "HOURS": (PERIOD_ONE_HOUR, PERIOD_FOUR_HOURS),
    "DAYS": (PERIOD_ONE_DAY,),
    "WEEKS": (PERIOD_ONE_WEEK,),
    "MONTHS": (PERIOD_ONE_MONTH,),
}

# Fiat currency for deposit instructions
FIAT_DEPOSIT_CURRENCY = "EUR"
