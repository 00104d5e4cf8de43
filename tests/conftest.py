import os

# Inject dummy credentials BEFORE any application imports happen
# so the proxy app can be built at import time during collection
# in CI environments without real .env files.
os.environ.setdefault("WEATHER_API_KEY", "dummy_weather_key")
os.environ.setdefault("IPDATA_API_KEY", "dummy_ipdata_key")
