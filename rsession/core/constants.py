"""
Project constants definitions
"""

# ============================================================
# Connection Defaults
# ============================================================

DEFAULT_SSH_PORT = 22
DEFAULT_SSH_TIMEOUT = 10

# Host key policies: accept any identity, warn on unknown, reject unknown
HOST_KEY_POLICY_ACCEPT = "accept"
HOST_KEY_POLICY_WARN = "warn"
HOST_KEY_POLICY_REJECT = "reject"
HOST_KEY_POLICIES = (
    HOST_KEY_POLICY_ACCEPT,
    HOST_KEY_POLICY_WARN,
    HOST_KEY_POLICY_REJECT,
)
DEFAULT_HOST_KEY_POLICY = HOST_KEY_POLICY_ACCEPT

# ============================================================
# Command Execution
# ============================================================

READ_CHUNK_SIZE = 32768
POLL_INTERVAL = 0.01
OUTPUT_ENCODING = "utf-8"

# ============================================================
# Remote Paths
# ============================================================

REMOTE_PATH_SEPARATOR = "/"
PART_FILE_SUFFIX = ".part"

# ============================================================
# SSH Config
# ============================================================

SSH_CONFIG_PATH = "~/.ssh/config"

# ============================================================
# Environment
# ============================================================

ENV_PREFIX = "RSESSION_"
