import logging

# Custom log levels, sitting just above INFO so warnings still outrank them.
CSCALE_STDOUT = logging.INFO + 2
CSCALE_CSV = logging.INFO + 4
CSCALE_FILE = logging.INFO + 8

logging.addLevelName(CSCALE_STDOUT, "CSCALE_STDOUT")
logging.addLevelName(CSCALE_CSV, "CSCALE_CSV")
logging.addLevelName(CSCALE_FILE, "CSCALE_FILE")

DEFAULT_FMT = "[%(asctime)s][%(levelname)s][%(name)s] %(message)s"

# Header of the per-decision CSV log.
DECISION_CSV_HEADER = ["service", "previous", "target", "applied", "cpu", "mem", "error"]

# Scaling policy defaults.
DEFAULT_STRATEGY = "balanced"
DEFAULT_CPU_THRESHOLD = 70.0
DEFAULT_MEM_THRESHOLD = 70.0
DEFAULT_MIN_REPLICAS = 1
DEFAULT_MAX_REPLICAS = 10
DEFAULT_INTERVAL = 30

# Seconds a single stats call may take before the service is skipped for the tick.
DEFAULT_SAMPLE_TIMEOUT = 10.0

# Environment variables read by the configuration layer.
ENV_PREFIX = "CSCALE_"
ENV_PROJECT_NAME = "COMPOSE_PROJECT_NAME"
DEFAULT_CONFIG_FILE = "autoscale.yaml"

# Labels Docker Compose attaches to every container it creates.
LABEL_PROJECT = "com.docker.compose.project"
LABEL_SERVICE = "com.docker.compose.service"
LABEL_ONEOFF = "com.docker.compose.oneoff"
