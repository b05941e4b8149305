import os
import sys


VERSION = "v0.4.0"


def _is_packaged_runtime() -> bool:
    """Return True when running from a packaged executable (PyInstaller)."""
    if bool(getattr(sys, "frozen", False)):
        return True
    try:
        main_mod = sys.modules.get("__main__")
        if main_mod is not None and hasattr(main_mod, "__compiled__"):
            return True
    except Exception:
        pass
    return False


def _env_float(name: str, default: float) -> float:
    """Read a positive float env var, falling back to default on bad input."""
    raw = os.environ.get(name, None)
    if raw is None:
        return float(default)
    try:
        value = float(str(raw).strip())
    except ValueError:
        return float(default)
    return value if value > 0 else float(default)


ECP_PORT = int(os.environ.get("SIMPLEREMOTE_ECP_PORT", "8060"))
DEVICE_INFO_TIMEOUT_S = _env_float("SIMPLEREMOTE_DEVICE_INFO_TIMEOUT_S", 5.0)
RECONNECT_TIMEOUT_S = _env_float("SIMPLEREMOTE_RECONNECT_TIMEOUT_S", 8.0)

DEBUG = os.environ.get("SIMPLEREMOTE_DEBUG", "0") == "1"
CONSOLE_LOG = os.environ.get("SIMPLEREMOTE_CONSOLE", "0") == "1"
LOG_ENABLED = os.environ.get("SIMPLEREMOTE_LOG", "0") == "1" or CONSOLE_LOG

RUNTIME_PACKAGED = _is_packaged_runtime()

if RUNTIME_PACKAGED:
    BASE_DIR = os.path.dirname(sys.executable)
else:
    BASE_DIR = os.path.join(os.path.expanduser("~"), ".simpleremote")

DATA_DIR = os.path.abspath(str(os.environ.get("SIMPLEREMOTE_DATA_DIR", BASE_DIR) or BASE_DIR))
PREFS_FILE = str(os.environ.get("SIMPLEREMOTE_PREFS_FILE", "") or "").strip() or os.path.join(
    DATA_DIR, "simpleremote_prefs.json"
)
LOG_FILE = os.path.join(DATA_DIR, "simpleremote.log")


def reload_from_env() -> None:
    """Reload runtime configuration from environment variables."""
    global ECP_PORT, DEVICE_INFO_TIMEOUT_S, RECONNECT_TIMEOUT_S
    global DEBUG, CONSOLE_LOG, LOG_ENABLED
    global DATA_DIR, PREFS_FILE, LOG_FILE

    ECP_PORT = int(os.environ.get("SIMPLEREMOTE_ECP_PORT", str(ECP_PORT)))
    DEVICE_INFO_TIMEOUT_S = _env_float("SIMPLEREMOTE_DEVICE_INFO_TIMEOUT_S", DEVICE_INFO_TIMEOUT_S)
    RECONNECT_TIMEOUT_S = _env_float("SIMPLEREMOTE_RECONNECT_TIMEOUT_S", RECONNECT_TIMEOUT_S)

    DEBUG = os.environ.get("SIMPLEREMOTE_DEBUG", "0") == "1"
    CONSOLE_LOG = os.environ.get("SIMPLEREMOTE_CONSOLE", "0") == "1"
    LOG_ENABLED = os.environ.get("SIMPLEREMOTE_LOG", "0") == "1" or CONSOLE_LOG

    DATA_DIR = os.path.abspath(str(os.environ.get("SIMPLEREMOTE_DATA_DIR", DATA_DIR) or DATA_DIR))
    PREFS_FILE = str(os.environ.get("SIMPLEREMOTE_PREFS_FILE", "") or "").strip() or os.path.join(
        DATA_DIR, "simpleremote_prefs.json"
    )
    LOG_FILE = os.path.join(DATA_DIR, "simpleremote.log")
