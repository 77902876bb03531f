"""
Runtime configuration, read from the environment (and a local .env file).
"""

import os

from dotenv import load_dotenv

load_dotenv()

# Database
DATABASE_URL = os.getenv("DATABASE_URL")
DATABASE_NAME = os.getenv("DATABASE_NAME", "portfolio")

# Auth
JWT_SECRET = os.getenv("JWT_SECRET", "super-secret-key-change")
JWT_ALGORITHM = "HS256"
JWT_EXPIRE_DAYS = int(os.getenv("JWT_EXPIRE_DAYS", "30"))

# Seed admin credentials via env
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@portfolio.dev")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "Admin123!")
ADMIN_NAME = os.getenv("ADMIN_NAME", "Admin User")

# Uploads
UPLOADS_DIR = os.getenv("UPLOADS_DIR", os.path.join(os.path.dirname(os.path.abspath(__file__)), "uploads"))
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))

# HTTP
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Email (contact form notifications)
RESEND_API_KEY = os.getenv("RESEND_API_KEY")
CONTACT_EMAIL = os.getenv("CONTACT_EMAIL", ADMIN_EMAIL)
MAIL_FROM = os.getenv("MAIL_FROM", "Portfolio <onboarding@resend.dev>")


def cors_origins():
    return [origin.strip() for origin in CORS_ORIGINS.split(",") if origin.strip()]
