"""
APISIX Route Console
Operator console for managing routes through the APISIX Admin API
"""

__version__ = "1.0.0"
