import os
import sys

from dotenv import load_dotenv

# Ensure src is in path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "src")))

load_dotenv()

from weather_dashboard.config.logging import setup_logging  # noqa: E402
from weather_dashboard.config.settings import settings  # noqa: E402


def main():
    setup_logging()
    if settings.WEATHER_API_KEY is None:
        print("⚠️ WEATHER_API_KEY not found in .env; upstream calls will fail.")

    from weather_dashboard.api.server import main as serve

    print(f"🌦️ Starting weather proxy on port {settings.PORT}...")
    serve()


if __name__ == "__main__":
    main()
