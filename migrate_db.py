import logging

from config import LOG_FORMAT, LOG_LEVEL
from database import engine, init_db

logger = logging.getLogger(__name__)

def migrate_db(bind=None):
    logger.info("Migrating database...")
    # Creates the transactions table if it does not exist yet
    init_db(bind or engine)
    logger.info("Migration complete!")

if __name__ == "__main__":
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
    migrate_db()
