#!/usr/bin/env python3
"""
Run the Emergency Response Coordinator API.
Set COORDINATOR_ADMIN_ID / COORDINATOR_STATUS_POLICY in environment (or .env).
"""
import os

from dotenv import load_dotenv
import uvicorn

load_dotenv()

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8000))
    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=port,
        reload=os.environ.get("RELOAD", "0") == "1",
    )
