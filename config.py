import os

# Security settings
SECRET_KEY = os.getenv("ACCESS_TOKEN_SECRET", "supersecretkey")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_HOURS = 10
TOKEN_COOKIE_NAME = "token"

# Database settings
DATABASE_URL = os.getenv("DATABASE_URL", "mongodb://localhost:27017")
DATABASE_NAME = os.getenv("DATABASE_NAME", "eatsExchangeDB")
FOOD_COLLECTION = "foods"
REQUEST_COLLECTION = "requests"

# Server settings
CORS_ORIGIN = os.getenv("CORS_ORIGIN", "http://localhost:5173")
PORT = int(os.getenv("PORT", 5000))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Route policy: PUT /foods/{id} is public unless this is switched on
GUARD_FOOD_UPDATES = os.getenv("GUARD_FOOD_UPDATES", "false").lower() in ("1", "true", "yes")
