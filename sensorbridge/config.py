import os
from pathlib import Path

# Default DB location under <repo>/data
ROOT = Path(__file__).resolve().parents[1]
DEFAULT_DATA_DIR = ROOT / "data"
DB_PATH = os.environ.get("DB_PATH", str(DEFAULT_DATA_DIR / "database.db"))

# Serial device
PORT_NAME = os.environ.get("PORT_NAME", "/dev/ttyS11")
DEFAULT_PORT = os.environ.get("DEFAULT_PORT", "/dev/ttyUSB0")
BAUD_RATE = int(os.environ.get("BAUD_RATE", "115000"))

# HTTP server
HOST_NAME = os.environ.get("HOST_NAME", "localhost")
HTTP_PORT = int(os.environ.get("HTTP_PORT", "7099"))

# Initial device configuration, replaced after a successful PUT /configure
FREQUENCY = int(os.environ.get("FREQUENCY", "115"))
DEBUG = os.environ.get("DEBUG", "false").strip().lower() in ("1", "true", "yes", "on")

COMMAND_TIMEOUT_S = float(os.environ.get("COMMAND_TIMEOUT_S", "10"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
# Settings loader (env overrides)
