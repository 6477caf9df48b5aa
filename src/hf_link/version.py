"""
hf-link Version Information

Centralized version constants; all modules should import the version from
here rather than defining their own.

Also provides the timestamp helpers used for log banners and status output,
which always use UTC with an explicit 'Z' marker.
"""

from datetime import datetime, timezone

# =============================================================================
# VERSION CONSTANTS
# =============================================================================

HF_LINK_VERSION = "1.0.0"

# Component versions (bumped when a heuristic or contract changes)
COMPONENT_VERSIONS = {
    'maidenhead': '1.1',      # 1.1: half-subsquare centre for 6-char locators
    'propagation': '1.0',
    'session': '1.0',
}


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
    return f"hf-link v{HF_LINK_VERSION}"


def log_version_info(logger) -> None:
    """Log version information at startup.

    Args:
        logger: Logger instance to use
    """
    logger.info(get_version_string())
    components = ', '.join(f"{name} {ver}" for name, ver in COMPONENT_VERSIONS.items())
    logger.info(f"   Components: {components}")
    logger.info(f"   Started: {utc_isoformat()}")
