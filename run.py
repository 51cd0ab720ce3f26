#!/usr/bin/env python3
# run.py
"""
Development server runner.

    python run.py            # http://localhost:8000, docs at /docs
"""
import os

import uvicorn

if __name__ == "__main__":
    port = int(os.getenv("PORT", "8000"))
    print(f"Starting Advisor Booking API on http://localhost:{port}")
    print(f"API Docs: http://localhost:{port}/docs")

    uvicorn.run("advisor_booking.main:app", host="0.0.0.0", port=port, reload=True, log_level="info")
