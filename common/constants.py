"""Project-wide constants (roster, ports, RPC names, timeouts, event types)."""

CLIENT_PROCESS_ID: str = "Client"

DEFAULT_SERVER_NAMES: tuple = ("Server1", "Server2", "Server3")

DEFAULT_ROSTER: tuple = (CLIENT_PROCESS_ID,) + DEFAULT_SERVER_NAMES

DEFAULT_SERVER_HOST: str = "localhost"
DEFAULT_SERVER_PORT: int = 5001

CALCULATOR_SERVICE_NAME: str = "calculator.Calculator"
HEALTH_CHECK_METHOD: str = f"/{CALCULATOR_SERVICE_NAME}/HealthCheck"
CALCULATE_PARTIAL_SUM_METHOD: str = f"/{CALCULATOR_SERVICE_NAME}/CalculatePartialSum"

CALCULATE_TIMEOUT_SECONDS: float = 10.0
PROBE_TIMEOUT_SECONDS: float = 1.0
HEALTH_REPORT_TIMEOUT_SECONDS: float = 2.0

# Simulated processing takes one millisecond per ten numbers, capped
MAX_PROCESSING_DELAY_MS: int = 100

SERVER_SHUTDOWN_GRACE_SECONDS: float = 5.0

TIMESTAMP_FORMAT: str = "%Y-%m-%d %H:%M:%S.%f"

EVENT_SERVER_START: str = "SERVER_START"
EVENT_CLIENT_START: str = "CLIENT_START"
EVENT_CLIENT_STOP: str = "CLIENT_STOP"
EVENT_HEALTH_CHECK: str = "HEALTH_CHECK"
EVENT_REQUEST_INIT: str = "REQUEST_INIT"
EVENT_REQUEST_RECEIVED: str = "REQUEST_RECEIVED"
EVENT_CALCULATION_COMPLETE: str = "CALCULATION_COMPLETE"
