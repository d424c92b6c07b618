"""
Ionosonde Filter Version Information

Centralized version constants for all ionofilter components.
All modules should import version from here rather than defining their own.
"""

from datetime import datetime, timezone

# =============================================================================
# VERSION CONSTANTS
# =============================================================================

# Main version - follows semantic versioning
IONOFILTER_VERSION = "1.0.0"

# Component versions (for tracking algorithm changes)
COMPONENT_VERSIONS = {
    'record_parser': '1.1',      # timestamp layout validated at ingestion
    'median_filter': '1.0',
    'plot_sinks': '1.0',
}

# Input schema version - bump when the station line layout changes
RECORD_SCHEMA_VERSION = "15-token-v1"


# =============================================================================
# TIMESTAMP UTILITIES
# =============================================================================

def utc_now() -> datetime:
    """Get current time in UTC with timezone info."""
    return datetime.now(timezone.utc)


def utc_isoformat() -> str:
    """Get current time as ISO 8601 string with 'Z' suffix.

    Example: '2025-12-08T21:05:00Z'
    """
    return utc_now().strftime('%Y-%m-%dT%H:%M:%SZ')


# =============================================================================
# VERSION INFO FOR LOGGING
# =============================================================================

def get_version_string() -> str:
    """Get formatted version string for logging."""
    return f"iono-filter v{IONOFILTER_VERSION}"


def log_version_info(logger) -> None:
    """Log version information at the start of a run.

    Args:
        logger: Logger instance to use
    """
    logger.info(f"{get_version_string()} ({utc_isoformat()})")
    logger.info(f"   Record schema: {RECORD_SCHEMA_VERSION}")
    components = ", ".join(f"{name} {version}" for name, version in COMPONENT_VERSIONS.items())
    logger.info(f"   Components: {components}")
