import os
from dotenv import load_dotenv

load_dotenv()

config_path = os.getenv("PADPOOL_CONFIG_PATH", "config.json")
data_dir = os.getenv("PADPOOL_DATA_DIR", "server_data")
host = os.getenv("PADPOOL_HOST", "0.0.0.0")
port = int(os.getenv("PADPOOL_PORT", "3000"))
log_level = os.getenv("PADPOOL_LOG_LEVEL", "INFO").upper()

if __name__ == "__main__":
    print(config_path, data_dir, host, port, log_level)
