import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Server
PORT = int(os.getenv("PORT", "60001"))
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///finance.db")

# Client
API_URL = os.getenv("API_URL", f"http://localhost:{PORT}/api")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
