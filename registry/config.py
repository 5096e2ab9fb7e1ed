import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./registry.db")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"

JWT_SECRET = os.getenv("JWT_SECRET", "your_really_long_secret_key")
JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24))  # 1 day

INSTITUTION_DOMAIN = os.getenv("INSTITUTION_DOMAIN", "sastra.ac.in").lower()
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", f"admin@{INSTITUTION_DOMAIN}").lower()

# Items flagged by this many distinct users drop out of the public feed
REPORT_HIDE_THRESHOLD = int(os.getenv("REPORT_HIDE_THRESHOLD", 3))

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")
    if origin.strip()
]
