"""Global logging and error handling utilities"""
import sys
import traceback

# Detect debug mode - True if running from source, False if packaged
DEBUG_MODE = not getattr(sys, 'frozen', False)

_diagnostic_sink = None

def set_diagnostic_sink(sink):
    """Set the callable that surfaces diagnostics to the user.

    Args:
        sink: Callable taking (title, message), or None to fall back to stderr
    """
    global _diagnostic_sink
    _diagnostic_sink = sink

def report_diagnostic(title: str, message: str):
    """Surface a non-fatal problem (e.g. bounding box unavailable) to the user.

    Never raises; editing continues with default values.
    """
    if _diagnostic_sink:
        _diagnostic_sink(title, message)
    else:
        print(f"DIAGNOSTIC: {title} - {message}", file=sys.stderr)

def loggerRaise(e: Exception, user_message: str = None, title: str = "Error"):
    """Handle exceptions with an optional user-facing message in release mode

    Args:
        e: The exception to handle
        user_message: User-friendly message to surface (optional)
        title: Title for the diagnostic

    In DEBUG_MODE:
        - Just raises the exception (shows full traceback)

    In RELEASE_MODE:
        - Logs the full traceback
        - Surfaces user message or exception string through the diagnostic sink
        - Then raises the exception
    """
    if DEBUG_MODE:
        # Dev mode: just raise to see full traceback
        raise e
    else:
        # Log the full traceback
        tb = traceback.format_exc()
        print(f"ERROR: {tb}", file=sys.stderr)

        message = user_message if user_message else str(e)
        report_diagnostic(title, message)

        # Re-raise so application can handle it appropriately
        raise e
