"""Pure constants for license removal. No side effects at import time."""

# === Endpoints ===
STORE_URL = "https://store.steampowered.com"
LICENSES_PATH = "/account/licenses/"
REMOVE_LICENSE_PATH = "/account/removelicense"

# === Response codes ===
# The removal endpoint answers with {"success": <code>}
THROTTLE_CODE = 84  # Too many removals - account is locked out for a while
SUCCESS_CODES = (1, 8)  # Both mean the license is gone

# === Delays (seconds) ===
DEFAULT_REQUEST_DELAY = 2.0  # Between two removal attempts
DEFAULT_COOLDOWN_SECONDS = 600.0  # 10 minutes after a throttle response
DEFAULT_COOLDOWN_TICK = 15.0  # Cooldown status update interval
DEFAULT_MAX_RETRY_DELAY = 120.0  # Cap for exponential retry backoff

# === Timeouts (seconds) ===
DEFAULT_REQUEST_TIMEOUT = 30.0

# === Rate reporting ===
HOUR_SECONDS = 3600.0

# === Discovery ===
REMOVE_LINK_SELECTOR = ".free_license_remove_link > a"
