"""Log event types for structured logging."""

from enum import StrEnum


class LogEvent(StrEnum):
    """Log event types for the plugin.

    Used with logger.info/warning/error extra dict:
        logger.info("message", extra={"event": LogEvent.VOLUME_CREATED, ...})
    """

    # Application lifecycle
    APP_STARTED = "app_started"
    APP_STOPPED = "app_stopped"
    SOCKET_CLEANUP_FAILED = "socket_cleanup_failed"

    # Plugin protocol
    VERB_OK = "verb_ok"
    VERB_FAILED = "verb_failed"
    UNHANDLED_EXCEPTION = "unhandled_exception"

    # Volume events
    VOLUME_CREATED = "volume_created"
    VOLUME_REMOVED = "volume_removed"

    # Async operation events
    OPERATION_SUBMITTED = "operation_submitted"
    OPERATION_PENDING = "operation_pending"
    OPERATION_COMPLETED = "operation_completed"
    OPERATION_FAILED = "operation_failed"

    # Identifier cache events
    CACHE_MISS = "cache_miss"
    CACHE_REFRESHED = "cache_refreshed"

    # gluster CLI
    GLUSTER_STDERR = "gluster_stderr"

    # Local state
    DB_READY = "db_ready"
