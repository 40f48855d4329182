from loguru import logger
from agrosphere.core.db import engine, Base

# Import all models so SQLAlchemy registers them
from agrosphere.modules.users.models import User
from agrosphere.modules.connections.models import Connection
from agrosphere.modules.messaging.models import Conversation, ConversationParticipant, Message
from agrosphere.modules.finance.models import FinanceRecord
from agrosphere.modules.notifications.models import Notification


def init_db():
    logger.info("Creating database tables")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")
