#!/usr/bin/env python3
"""
Run script for the Login API.
This script launches the FastAPI server built by login_web.main.create_app.
"""
import sys
import traceback

import uvicorn

if __name__ == "__main__":
    try:
        print("Starting Login API server...")
        print("Access the API at http://localhost:3000")
        print("API documentation at http://localhost:3000/docs")

        uvicorn.run(
            "login_web.main:create_app",
            factory=True,
            host="0.0.0.0",
            port=3000,
            log_level="info"
        )
    except Exception as e:
        print(f"Error starting server: {e}")
        traceback.print_exc()
        sys.exit(1)
