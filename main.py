# main.py
# Role: Application entry point for the finance API.
#       Builds the app from environment settings so it can be served with
#       `uvicorn main:app` or run directly with `python main.py`.

"""
Main entry point for the family finance API.

Here we only:
- read settings from the environment (.env supported)
- build the app through app.main.create_app
"""

import uvicorn

from app.main import create_app

# FastAPI application instance
app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
