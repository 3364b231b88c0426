"""
Central Configuration File

ALL configuration values live here. This is the single source of truth.

Guidelines:
- Secrets (OAuth files, folder IDs) should be in .env, NOT here
- Import these settings in modules: from config.settings import GPS_SAMPLE_INTERVAL
- Per-device paths (serial ports, output dirs) can be overridden from .env
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# =============================================================================
# DEVICE DISCOVERY CONFIGURATION
# =============================================================================

# sysfs roots scanned for cameras
V4L2_SYSFS_PATH = Path(os.getenv("V4L2_SYSFS_PATH", "/sys/class/video4linux"))
USB_SYSFS_PATH = Path(os.getenv("USB_SYSFS_PATH", "/sys/bus/usb/devices"))

# USB device class code for imaging devices
USB_CLASS_IMAGING = 0x06

# Automatically select the first camera found when nothing is selected
AUTO_SELECT_FIRST_DEVICE = True

# =============================================================================
# RECORDING CONFIGURATION
# =============================================================================

# Capture caps communicated to the camera at start time
MAX_RECORDING_DURATION = int(os.getenv("MAX_RECORDING_DURATION", "300"))  # 5 min
MAX_RECORDING_SIZE_BYTES = int(
    os.getenv("MAX_RECORDING_SIZE_BYTES", str(50 * 1024 * 1024)),
)  # 50 MB

# Elapsed-time counter (display only)
TICK_INTERVAL = 1.0  # seconds

# Where finished clips are written
RECORDINGS_DIR = Path(os.getenv("RECORDINGS_DIR", "./recordings"))

# Video Settings
VIDEO_WIDTH = 1280
VIDEO_HEIGHT = 720
VIDEO_FPS = 30
VIDEO_CODEC = "libx264"
VIDEO_PRESET = "ultrafast"  # FFmpeg encoding preset
VIDEO_CRF = 23  # Constant Rate Factor (quality)

# Camera Configuration
CAMERA_WARMUP_TIME = 1.0  # seconds

# Video File Naming
VIDEO_FILENAME_PREFIX = "recording"
VIDEO_FILENAME_EXTENSION = ".mp4"

# =============================================================================
# GPS CONFIGURATION
# =============================================================================

# Serial GPS receiver (NMEA 0183)
GPS_SERIAL_PORT = os.getenv("GPS_SERIAL_PORT", "/dev/ttyUSB0")
GPS_BAUDRATE = int(os.getenv("GPS_BAUDRATE", "9600"))
GPS_READ_TIMEOUT = 1.0  # seconds per readline

# How often the sampler drains received fixes into the log
GPS_SAMPLE_INTERVAL = 1.0  # seconds

# User Equivalent Range Error: accuracy estimate = HDOP * UERE
GPS_UERE_METERS = 5.0

# Crash-recovery journal (one JSON line per fix). Empty = disabled
GPS_JOURNAL_DIR = os.getenv("GPS_JOURNAL_DIR", "")

# =============================================================================
# UPLOAD CONFIGURATION
# =============================================================================

# Run the upload handoff on a worker thread instead of inside stop()
UPLOAD_IN_BACKGROUND = os.getenv("UPLOAD_IN_BACKGROUND", "false").lower() == "true"

# Upload Settings
UPLOAD_CHUNK_SIZE = 10 * 1024 * 1024  # 10 MB chunks
UPLOAD_TIMEOUT = 600  # 10 minutes

# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

LOG_DIR = os.getenv("LOG_DIR", "/var/log/gps-recorder")
LOG_SERVICE_FILE = "service.log"
LOG_BACKUP_DAYS = 7

# =============================================================================
# SECRETS (loaded from .env)
# =============================================================================
# IMPORTANT: These should NEVER be committed to version control!
# Create a .env file in the project root with these values

# Google OAuth Configuration (file-based)
GOOGLE_CLIENT_SECRET_PATH = os.getenv(
    "GOOGLE_CLIENT_SECRET_PATH",
    "credentials/client_secret.json",
)
GOOGLE_TOKEN_PATH = os.getenv("GOOGLE_TOKEN_PATH", "credentials/token.json")
DRIVE_FOLDER_ID = os.getenv("DRIVE_FOLDER_ID", "")  # Optional target folder
