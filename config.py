import os
from dotenv import load_dotenv

load_dotenv()

basedir = os.path.abspath(os.path.dirname(__file__))

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-key-change-in-production'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///resort.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # JWT Configuration (tokens are issued by the auth frontend)
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY") or SECRET_KEY
    JWT_ACCESS_TOKEN_EXPIRES = int(os.getenv("JWT_ACCESS_TOKEN_EXPIRES", 3600))  # 1 hour
    # EventSource cannot send headers, so the stream endpoint reads ?jwt=
    JWT_TOKEN_LOCATION = ["headers", "query_string"]

    # Payment proof storage
    BLOB_STORE = os.getenv("BLOB_STORE", "local")  # local, s3
    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", os.path.join(basedir, "uploads"))
    UPLOAD_URL_PREFIX = os.getenv("UPLOAD_URL_PREFIX", "/uploads")
    MAX_CONTENT_LENGTH = int(os.getenv("MAX_CONTENT_LENGTH", 5 * 1024 * 1024))  # 5MB

    S3_BUCKET_NAME = os.getenv("S3_BUCKET_NAME", "resort-payment-proofs")
    S3_ENDPOINT_URL = os.getenv("S3_ENDPOINT_URL")
    S3_ACCESS_KEY = os.getenv("S3_ACCESS_KEY")
    S3_SECRET_KEY = os.getenv("S3_SECRET_KEY")
    S3_REGION = os.getenv("S3_REGION", "ap-southeast-1")
    S3_PUBLIC_BASE = os.getenv("S3_PUBLIC_BASE", "")

    # Seconds between keep-alive comments on the notification stream
    NOTIFICATION_STREAM_KEEPALIVE = int(os.getenv("NOTIFICATION_STREAM_KEEPALIVE", 15))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
