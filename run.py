#!/usr/bin/env python3
# run.py
"""
Development server runner.

Reads host, port and reload from the environment; the app itself reads the
rest of its configuration from .env via Settings.
"""
import os

import uvicorn

if __name__ == "__main__":
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    reload = os.getenv("RELOAD", "true").lower() == "true"

    print(f"Starting TutorLink API at http://{host}:{port} (docs at /docs)")
    uvicorn.run("tutorlink.main:app", host=host, port=port, reload=reload, log_level="info")
