"""
Database initialization script
Creates the categories and products tables
"""
from app.database import engine, Base
from app.models.products import Product  # noqa: F401
from app.models.categories import Category  # noqa: F401
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

def init_db():
    """Initialize database with all tables"""
    try:
        logger.info("Creating all database tables...")
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Error initializing database: {str(e)}")
        raise

if __name__ == "__main__":
    init_db()
