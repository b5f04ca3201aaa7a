"""
Deployment entry point for the Accounting Law Search API.
Launches the FastAPI application on the port given by $PORT.
"""
import os

# Import and run the FastAPI app
from lawsearch.server.main import app

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", 8000)))
