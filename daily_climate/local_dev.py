"""
Local development server for the dashboard.
Run from the root directory: python -m daily_climate.local_dev
"""

from pathlib import Path

import uvicorn
from dotenv import load_dotenv

root_dir = Path(__file__).parent.parent


def main() -> None:
    env_file = root_dir / ".env"
    if env_file.exists():
        load_dotenv(env_file)
        print(f"Loaded environment variables from {env_file}")
    else:
        print("No .env file found. Using .env.example as reference.")

    print("Starting The Daily Climate...")
    print("API Documentation: http://localhost:8000/docs")

    uvicorn.run(
        "daily_climate.app:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )


if __name__ == "__main__":
    main()
