DEFAULT_API_BASE_URL = "http://127.0.0.1:3000"
WARM_PATH = "/api/predictions/warm"
STATUS_PATH = "/api/predictions/{prediction_id}"

# Small, reliable animation the backend already has cached.
WARM_TARGET = "/gifs/thumbs_up.gif"

DEFAULT_COOLDOWN_PERIOD = 10.0
DEFAULT_POLL_INTERVAL = 2.0
DEFAULT_REQUEST_TIMEOUT = 60.0

API_URL_ENV = "PREWARM_API_URL"
COOLDOWN_ENV = "PREWARM_COOLDOWN"
POLL_INTERVAL_ENV = "PREWARM_POLL_INTERVAL"
MAX_POLLS_ENV = "PREWARM_MAX_POLLS"

TERMINAL_STATUSES = ("succeeded", "failed")
