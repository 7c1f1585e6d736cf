# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Every variable has a working default; `taskflow` runs without any of them set.
"""

ENV_VARS = {
    # App / logging
    "TASKFLOW_APP_NAME": "App display name (default: taskflow).",
    "TASKFLOW_LOG_LEVEL": "Console logging level (default: INFO).",
    "TASKFLOW_DATA_DIR": "Local data directory for logs (default: .local/taskflow).",
    # HTTP server (`taskflow serve`)
    "TASKFLOW_HOST": "Bind address (default: 127.0.0.1).",
    "TASKFLOW_PORT": "Bind port (default: 5000).",
    "TASKFLOW_DEBUG": "Flask debug mode (true/false).",
    # HTTP client (`taskflow console` against a running server)
    "TASKFLOW_API_URL": "Base URL of a taskflow server (empty => in-process store).",
    "TASKFLOW_HTTP_TIMEOUT_SECONDS": "Per-request timeout (default: 10, min 0.5).",
    # Store
    "TASKFLOW_SEED_SAMPLE_DATA": "Load the five demo tasks at startup (default: true).",
    # Notifications
    "TASKFLOW_NOTIFICATIONS_ENABLED": "Enable due-date alerts (true/false).",
    "TASKFLOW_NOTIFY_INTERVAL_SECONDS": "Polling interval (default: 60).",
    "TASKFLOW_NOTIFY_COOLDOWN_MINUTES": "Per-task alert cooldown (default: 30).",
    "TASKFLOW_NOTIFY_DUE_SOON_HOURS": "Due-soon alert window (default: 2).",
    "TASKFLOW_DUE_SOON_DISPLAY_HOURS": "Due-soon badge window in views (default: 48).",
}
