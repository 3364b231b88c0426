#!/usr/bin/env python3
"""
Google Drive Authentication Setup Script

Run this ONCE to authenticate with Google Drive and generate token.json.
After this, the recorder refreshes the token automatically.

Usage:
    python setup_drive_auth.py [--port 8080]

Requirements:
    1. client_secret.json from Google Cloud Console (Desktop app)
    2. .env file with GOOGLE_CLIENT_SECRET_PATH and GOOGLE_TOKEN_PATH
"""

import argparse
import importlib.util
import logging
import os
import sys

from dotenv import load_dotenv

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def load_env_file():
    """Load environment variables from .env file"""
    if not os.path.exists(".env"):
        logger.warning(".env file not found in project root, using defaults")
        logger.info("Create .env file with:")
        logger.info("  GOOGLE_CLIENT_SECRET_PATH=/path/to/client_secret.json")
        logger.info("  GOOGLE_TOKEN_PATH=/path/to/token.json")
        logger.info("  DRIVE_FOLDER_ID=<optional folder id>")
        return

    load_dotenv()
    logger.info("Loaded environment from .env")


def check_dependencies():
    """Check required Google client packages are installed"""
    required = ["google.auth", "google_auth_oauthlib", "googleapiclient"]
    missing = [name for name in required if importlib.util.find_spec(name) is None]

    if missing:
        logger.error(f"Missing required packages: {', '.join(missing)}")
        logger.info("Install with: pip install -e .")
        sys.exit(1)

    logger.info("All required packages installed")


def validate_credentials() -> str:
    """Validate client_secret.json exists"""
    # Import settings after .env is loaded
    from config import settings

    client_secret_path = settings.GOOGLE_CLIENT_SECRET_PATH

    if not client_secret_path:
        logger.error("GOOGLE_CLIENT_SECRET_PATH not set in .env")
        sys.exit(1)

    if not os.path.exists(client_secret_path):
        logger.error(f"client_secret.json not found: {client_secret_path}")
        logger.info("To get client_secret.json:")
        logger.info("1. Go to: https://console.cloud.google.com/apis/credentials")
        logger.info("2. Enable the Google Drive API for the project")
        logger.info("3. Create OAuth 2.0 Client ID (Desktop app)")
        logger.info(f"4. Download the JSON file and save it to: {client_secret_path}")
        sys.exit(1)

    logger.info(f"Found client_secret.json: {client_secret_path}")
    return client_secret_path


def validate_token_path() -> str:
    """Validate token.json path is configured"""
    from config import settings

    token_path = settings.GOOGLE_TOKEN_PATH

    if not token_path:
        logger.error("GOOGLE_TOKEN_PATH not set in .env")
        sys.exit(1)

    token_dir = os.path.dirname(token_path)
    if token_dir and not os.path.exists(token_dir):
        os.makedirs(token_dir)
        logger.info(f"Created directory: {token_dir}")

    logger.info(f"Token will be saved to: {token_path}")
    return token_path


def run_authentication(client_secret_path: str, token_path: str, port: int):
    """Run OAuth authentication flow"""
    from upload.auth.oauth_manager import run_initial_auth

    logger.info("=" * 60)
    logger.info("Starting Google Drive Authentication")
    logger.info("=" * 60)
    logger.info("1. Browser will open automatically")
    logger.info("2. Log in to the Google account that should receive recordings")
    logger.info("3. Grant permissions to the app")
    logger.info("4. Token will be saved automatically")
    logger.info("Press Enter to continue...")
    input()

    if not run_initial_auth(client_secret_path, token_path, port=port):
        logger.error("=" * 60)
        logger.error("AUTHENTICATION FAILED")
        logger.error("=" * 60)
        logger.error("Troubleshooting:")
        logger.error("1. Check client_secret.json is valid")
        logger.error("2. Ensure OAuth consent screen is configured")
        logger.error(f"3. Check nothing else is listening on port {port}")
        sys.exit(1)

    logger.info("=" * 60)
    logger.info("AUTHENTICATION SUCCESSFUL")
    logger.info("=" * 60)
    logger.info(f"Token saved to: {token_path}")
    logger.info("Keep token.json secret, it grants access to your Drive files")


def main():
    """Main setup flow"""
    parser = argparse.ArgumentParser(description="One-time Google Drive OAuth setup")
    parser.add_argument("--port", type=int, default=8080, help="local OAuth redirect port")
    args = parser.parse_args()

    logger.info("=" * 60)
    logger.info("Google Drive Authentication Setup")
    logger.info("=" * 60)

    logger.info("[Step 1/5] Loading configuration...")
    load_env_file()

    logger.info("[Step 2/5] Checking dependencies...")
    check_dependencies()

    logger.info("[Step 3/5] Validating client_secret.json...")
    client_secret_path = validate_credentials()

    logger.info("[Step 4/5] Validating token path...")
    token_path = validate_token_path()

    logger.info("[Step 5/5] Running authentication flow...")
    run_authentication(client_secret_path, token_path, args.port)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        logger.info("Setup cancelled by user")
        sys.exit(1)
