"""Development and production server runner"""
import uvicorn
import os
from dotenv import load_dotenv

# PORT and ENVIRONMENT may come from .env
load_dotenv()

if __name__ == "__main__":
    port = int(os.getenv("PORT", 8000))

    # No autoreload in production
    is_production = os.getenv("ENVIRONMENT", "development") == "production"

    uvicorn.run(
        "placehub.main:app",
        host="0.0.0.0",
        port=port,
        reload=not is_production,
        log_level="info",
    )
