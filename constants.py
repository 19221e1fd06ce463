import os

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 5000))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", None)

ROOM_CAPACITY = int(os.getenv("ROOM_CAPACITY", 10))
ROOM_ID_LENGTH = int(os.getenv("ROOM_ID_LENGTH", 6))
ROOM_ID_MAX_ATTEMPTS = 8

CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]

DEFAULT_DISPLAY_NAME = "Anonymous"
