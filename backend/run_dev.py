"""run_dev.py — Start the upcoming events block in development mode.

Equivalent CLI command:
    uvicorn upcoming_events.api.main:app --reload --host 0.0.0.0 --port 8000
"""

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "upcoming_events.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="debug",
    )
