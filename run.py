#!/usr/bin/env python3
"""
APISIX Route Console Startup Script
Simple script to run the console service
"""

import argparse
import os

import uvicorn
from dotenv import load_dotenv


def main():
    # Load environment variables
    load_dotenv()

    # Parse command line arguments
    parser = argparse.ArgumentParser(description='APISIX Route Console')
    parser.add_argument('--host', default=os.getenv('HOST', '0.0.0.0'), help='Host to bind to')
    parser.add_argument('--port', type=int, default=int(os.getenv('PORT', '8080')), help='Port to bind to')
    parser.add_argument('--reload', action='store_true', default=os.getenv('RELOAD', 'false').lower() == 'true', help='Enable auto-reload')
    args = parser.parse_args()

    log_level = os.getenv("LOG_LEVEL", "info").lower()

    print(f"Starting APISIX Route Console on {args.host}:{args.port}")
    print(f"  Reload: {args.reload}, Log Level: {log_level}")

    uvicorn.run(
        "route_console.console:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=log_level
    )


if __name__ == "__main__":
    main()
