import os

from dotenv import load_dotenv

load_dotenv()


def _split(value):
    return [item.strip() for item in value.split(",") if item.strip()]


LATEST_FEE_ORDERINGS = ("insertion", "calendar")


class Settings:
    # --------------------------
    # App
    # --------------------------
    APP_NAME = os.environ.get("APP_NAME", "School Fee Ledger")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
    CORS_ORIGINS = _split(os.environ.get("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173"))

    # --------------------------
    # Database
    # --------------------------
    DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./school_fees.db")
    # Public fee check runs on its own (service role) connection
    SERVICE_DATABASE_URL = os.environ.get("SERVICE_DATABASE_URL", DATABASE_URL)

    # --------------------------
    # Admin auth
    # --------------------------
    SECRET_KEY = os.environ.get("SECRET_KEY", "change-this-secret-key")
    ALGORITHM = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES = int(os.environ.get("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))  # 24 hours
    ADMIN_EMAIL = os.environ.get("ADMIN_EMAIL", "admin@school.local")
    ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", "admin")

    # --------------------------
    # Fee ledger
    # --------------------------
    # "insertion" = latest entered record, "calendar" = latest (year, month)
    LATEST_FEE_ORDERING = os.environ.get("LATEST_FEE_ORDERING", "insertion").lower()

    # --------------------------
    # Profile images (Cloudinary)
    # --------------------------
    CLOUDINARY_CLOUD_NAME = os.environ.get("CLOUDINARY_CLOUD_NAME", "")
    CLOUDINARY_API_KEY = os.environ.get("CLOUDINARY_API_KEY", "")
    CLOUDINARY_API_SECRET = os.environ.get("CLOUDINARY_API_SECRET", "")
    CLOUDINARY_FOLDER = os.environ.get("CLOUDINARY_FOLDER", "students")
    MAX_IMAGE_BYTES = int(os.environ.get("MAX_IMAGE_BYTES", str(5 * 1024 * 1024)))  # 5 MiB

    # --------------------------
    # UPI payments
    # --------------------------
    UPI_ID = os.environ.get("UPI_ID", "school@upi")
    PAYEE_NAME = os.environ.get("PAYEE_NAME", "School Fee Account")

    def validate(self):
        """Fail at startup on settings that would break every request."""
        if self.LATEST_FEE_ORDERING not in LATEST_FEE_ORDERINGS:
            raise ValueError(
                f"LATEST_FEE_ORDERING must be one of {LATEST_FEE_ORDERINGS}, got {self.LATEST_FEE_ORDERING!r}"
            )
        return self


settings = Settings().validate()
