# Constants
WINDOW_SECONDS = 1.0  # length of one accumulation window
WINDOW_CAPACITY = 10  # closed windows kept for the rolling average
REPORT_INTERVAL = 1.0  # seconds
STREAM_CHUNK_SIZE = 65536  # 64 KB

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

KB = 1024
MB = 1024 * 1024
